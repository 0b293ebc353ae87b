"""Structured, JSON and text renderings of an error envelope."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from errenvelope.core.serialization import safe_stringify
from errenvelope.core.serialization import stack_frame_lines
from errenvelope.schemas.error import ErrorDocument
from errenvelope.schemas.error import ErrorRecord
from errenvelope.services.normalizer import project_fields

_WITH_PREFIX = " " * 4 + "with "
_WITH_CONTINUATION = " " * 9


def to_structured(records: Iterable[ErrorRecord], *, include_stack: bool = False) -> dict[str, Any]:
    """Return ``{"errors": [...]}`` with every record re-projected through the whitelist."""
    return {"errors": [project_fields(record, include_stack=include_stack) for record in records]}


def to_document(records: Iterable[ErrorRecord], *, include_stack: bool = False) -> ErrorDocument:
    """Return the structured rendering as the validated wire model."""
    return ErrorDocument.model_validate(to_structured(records, include_stack=include_stack))


def to_json(records: Iterable[ErrorRecord], passthrough: Any = None) -> str | dict[str, Any]:
    """Return JSON text, or the structured value itself when ``passthrough`` is truthy."""
    structured = to_structured(records)
    if passthrough:
        return structured
    return safe_stringify(structured)


def to_text(records: Iterable[ErrorRecord]) -> str:
    """Render a numbered multi-error report with stack frames and record data."""
    snapshot = list(records)
    count = len(snapshot)
    return "\n\n".join(_record_block(record, index, count) for index, record in enumerate(snapshot, start=1))


def _record_block(record: ErrorRecord, index: int, count: int) -> str:
    description = f"[{record.code}] {record.message}" if record.code else record.message
    lines = [f"Error {index} of {count}: {description}"]
    if record.stack:
        lines.extend(stack_frame_lines(record.stack))
    lines.append(_data_block(record))
    return "\n".join(lines)


def _data_block(record: ErrorRecord) -> str:
    data = project_fields(record)
    data.pop("message", None)
    rendered = safe_stringify(data, indent=2).splitlines()
    return _WITH_PREFIX + f"\n{_WITH_CONTINUATION}".join(rendered)
