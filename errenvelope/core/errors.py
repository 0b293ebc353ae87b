"""Throwable multi-error envelope."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from errenvelope.core.config import get_envelope_settings
from errenvelope.core.serialization import capture_stack
from errenvelope.core.serialization import clone
from errenvelope.schemas.error import RECORD_FIELDS
from errenvelope.schemas.error import ErrorDocument
from errenvelope.schemas.error import ErrorRecord
from errenvelope.services import renderer
from errenvelope.services.aggregator import collect_records
from errenvelope.services.normalizer import normalize
from errenvelope.services.normalizer import project_fields


class ErrorEnvelope(Exception):
    """Exception carrying an ordered, append-only sequence of error records.

    The first record holds the envelope's own fields: ``str(envelope)`` is its
    message and the ``code``/``source``/``status``/``details``/``links``
    properties read from it.

    Construction reads only the top-level fields of ``value``; an existing
    envelope or an ``{"errors": [...]}`` mapping is never flattened into the
    new one. Use :meth:`append` to carry over every record.
    """

    def __init__(
        self,
        value: Any = None,
        code: str | None = None,
        source: str | None = None,
        details: Any = None,
        status: int | None = None,
        links: Any = None,
        *,
        with_stack: bool | None = None,
    ) -> None:
        record = normalize(value, code=code, source=source, details=details, status=status, links=links)

        settings = get_envelope_settings()
        if settings.capture_stack if with_stack is None else with_stack:
            header = f"{type(self).__name__}: {record.message}" if record.message else type(self).__name__
            record = record.model_copy(update={"stack": capture_stack(header, limit=settings.stack_limit)})

        super().__init__(record.message)
        self._records: list[ErrorRecord] = [record]

    @property
    def errors(self) -> tuple[ErrorRecord, ...]:
        return tuple(record.model_copy(deep=True) for record in self._records)

    @property
    def message(self) -> str:
        return self._records[0].message

    @property
    def code(self) -> str | None:
        return self._records[0].code

    @property
    def source(self) -> str | None:
        return self._records[0].source

    @property
    def status(self) -> int | None:
        return self._records[0].status

    @property
    def details(self) -> Any:
        return clone(self._records[0].details)

    @property
    def links(self) -> Any:
        return clone(self._records[0].links)

    @property
    def stack(self) -> str | None:
        return self._records[0].stack

    def append(self, value: Any, source: str | None = None) -> ErrorEnvelope:
        """Append the records carried by ``value`` and return this envelope.

        ``source`` is applied to appended records that have none of their own.
        Appending ``None`` or the envelope itself changes nothing.
        """
        self._records.extend(collect_records(value, target=self, source=source))
        return self

    def get(self, key: str | None = None) -> Any:
        """Return one top-level field, or all of them as a dict when ``key`` is omitted."""
        if key is None:
            return project_fields(self._records[0])
        if key in RECORD_FIELDS or key in ("stack", "errors"):
            return getattr(self, key)
        return None

    def set(self, key_or_fields: str | Mapping[str, Any], value: Any = None) -> ErrorEnvelope:
        """Replace one top-level field, or every whitelisted field present in a mapping."""
        if isinstance(key_or_fields, str):
            if key_or_fields in RECORD_FIELDS:
                projected = project_fields({key_or_fields: value})
                self._replace_head({key_or_fields: projected.get(key_or_fields)})
        elif value is None and isinstance(key_or_fields, Mapping):
            projected = project_fields(key_or_fields)
            self._replace_head({name: projected[name] for name in RECORD_FIELDS if name in projected})
        return self

    def to_structured(self, *, include_stack: bool = False) -> dict[str, Any]:
        """Return ``{"errors": [...]}`` with only whitelisted fields per record."""
        return renderer.to_structured(self._records, include_stack=include_stack)

    def to_document(self, *, include_stack: bool = False) -> ErrorDocument:
        return renderer.to_document(self._records, include_stack=include_stack)

    def to_json(self, passthrough: Any = None) -> str | dict[str, Any]:
        """Return compact JSON text, or the structured dict when ``passthrough`` is truthy."""
        return renderer.to_json(self._records, passthrough)

    def to_text(self) -> str:
        """Return the human-readable report covering every record."""
        return renderer.to_text(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, errors={len(self._records)})"

    def _replace_head(self, update: dict[str, Any]) -> None:
        if not update:
            return
        if "message" in update and update["message"] is None:
            update["message"] = ""
        self._records[0] = self._records[0].model_copy(update=update)
        self.args = (self._records[0].message,)
