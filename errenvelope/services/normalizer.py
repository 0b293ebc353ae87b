"""Input classification and whitelist projection into canonical error records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Protocol
from typing import runtime_checkable
import logging

from errenvelope.core.serialization import clone
from errenvelope.core.serialization import format_exception_stack
from errenvelope.schemas.error import RECORD_FIELDS
from errenvelope.schemas.error import ErrorRecord

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("message", "code", "source")
_STATUS_ALIASES = ("statusCode", "status_code")


@runtime_checkable
class SupportsStructuredErrors(Protocol):
    """Anything that can render itself as ``{"errors": [...]}``."""

    def to_structured(self) -> Any: ...


@dataclass(frozen=True)
class TextInput:
    message: str


@dataclass(frozen=True)
class FieldsInput:
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class ForeignInput:
    value: Any


ErrorInput = TextInput | FieldsInput | ForeignInput


def classify_input(value: Any) -> ErrorInput | None:
    """Tag a raw value with the input variant used for dispatch."""
    if value is None:
        return None
    if isinstance(value, str):
        return TextInput(message=value)
    if isinstance(value, Mapping):
        return FieldsInput(fields=value)
    return ForeignInput(value=value)


def is_error_like(value: Any) -> bool:
    """Return whether ``value`` can render itself as a multi-error value."""
    try:
        if not value:
            return False
        return isinstance(value, SupportsStructuredErrors) and callable(value.to_structured)
    except Exception:
        logger.debug("Rejected error-like probe for %s", type(value).__name__, exc_info=True)
        return False


def project_fields(
    value: Any,
    *,
    include_stack: bool = False,
    source: str | None = None,
) -> dict[str, Any]:
    """Copy only the whitelisted record fields out of an arbitrary value.

    Text becomes the message. Mappings are read by key and every other object
    by attribute; a field that cannot be read is treated as absent. ``details``
    and ``links`` are deep-copied so the result never aliases the input. When
    ``source`` is given it fills the ``source`` field only if the value has none.
    """
    variant = classify_input(value)
    if variant is None:
        data: dict[str, Any] = {}
    elif isinstance(variant, TextInput):
        data = {"message": variant.message}
    elif isinstance(variant, FieldsInput):
        data = _project_object(variant.fields, include_stack=include_stack)
    else:
        data = _project_object(variant.value, include_stack=include_stack)

    if source is not None and data.get("source") is None:
        override = _as_text(source)
        if override is not None:
            data["source"] = override
    return _ordered(data)


def normalize(
    value: Any = None,
    code: str | None = None,
    source: str | None = None,
    details: Any = None,
    status: int | None = None,
    links: Any = None,
) -> ErrorRecord:
    """Build one canonical record from ``value`` plus optional fields supplied alongside it.

    Envelope-shaped values are not flattened: only their top-level fields are
    read, so ``{"errors": [...]}`` yields an empty-message record.
    """
    data = project_fields(value)
    alongside = project_fields(
        {"code": code, "source": source, "details": details, "status": status, "links": links}
    )
    for name, candidate in alongside.items():
        current = data.get(name)
        if current is None or (isinstance(current, (str, int)) and not current):
            data[name] = candidate
    return ErrorRecord(**_ordered(data))


def _project_object(value: Any, *, include_stack: bool) -> dict[str, Any]:
    data: dict[str, Any] = {}

    for alias in _STATUS_ALIASES:
        legacy_status = _as_status(_read_field(value, alias))
        if legacy_status is not None:
            data["status"] = legacy_status
            break

    for name in RECORD_FIELDS:
        raw = _read_field(value, name)
        if raw is None:
            continue
        if name in _TEXT_FIELDS:
            text = _as_text(raw)
            if text is not None:
                data[name] = text
        elif name == "status":
            status = _as_status(raw)
            if status is not None:
                data[name] = status
        else:
            copied = _clone_field(name, raw)
            if copied is not None:
                data[name] = copied

    if isinstance(value, BaseException) and "message" not in data:
        text = _as_text(value)
        if text:
            data["message"] = text

    if include_stack:
        stack = _as_text(_read_field(value, "stack"))
        if stack is None and isinstance(value, BaseException):
            stack = format_exception_stack(value)
        if stack:
            data["stack"] = stack

    return data


def _read_field(value: Any, name: str) -> Any:
    try:
        if isinstance(value, Mapping):
            return value.get(name)
        return getattr(value, name, None)
    except Exception:
        logger.debug("Dropped unreadable field %r from %s", name, type(value).__name__, exc_info=True)
        return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception:
        logger.debug("Dropped field that cannot be rendered as text: %s", type(value).__name__)
        return None


def _as_status(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except Exception:
        logger.debug("Ignored non-numeric status value %r", value)
        return None


def _clone_field(name: str, value: Any) -> Any:
    try:
        return clone(value)
    except Exception:
        logger.warning("Dropped %s value of type %s that cannot be copied", name, type(value).__name__)
        return None


def _ordered(data: Mapping[str, Any]) -> dict[str, Any]:
    return {name: data[name] for name in (*RECORD_FIELDS, "stack") if name in data}
