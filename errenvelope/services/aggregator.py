"""Collect the records contributed by a value appended to an envelope."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from typing import Any
import inspect
import logging

from errenvelope.schemas.error import ErrorRecord
from errenvelope.services.normalizer import is_error_like
from errenvelope.services.normalizer import project_fields

logger = logging.getLogger(__name__)

_NOT_RENDERED = object()


def collect_records(value: Any, *, target: object, source: str | None = None) -> list[ErrorRecord]:
    """Return the records ``value`` adds to ``target``, in reporting order.

    Error-like values contribute every record they render, envelope-shaped
    values every entry of their ``errors`` sequence, anything else a single
    projection of itself. Absent values, the target itself and error-like
    values whose rendering carries no ``errors`` sequence contribute nothing.
    """
    if value is None or value is target:
        return []

    if is_error_like(value):
        rendered = _render(value)
        if rendered is not _NOT_RENDERED:
            entries = _errors_sequence(rendered)
            if entries is None:
                logger.debug("Ignored %s rendering without an errors sequence", type(value).__name__)
                return []
            return _project_entries(entries, source=source)

    entries = _errors_sequence(value)
    if entries is not None:
        return _project_entries(entries, source=source)

    return [ErrorRecord(**project_fields(value, include_stack=True, source=source))]


def _render(value: Any) -> Any:
    try:
        method = value.to_structured
        if _accepts_include_stack(method):
            return method(include_stack=True)
        return method()
    except Exception:
        logger.debug("Rendering %s failed; projecting it directly", type(value).__name__, exc_info=True)
        return _NOT_RENDERED


def _accepts_include_stack(method: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(method).parameters
    except (TypeError, ValueError):
        return False
    if "include_stack" in parameters:
        return True
    return any(parameter.kind is inspect.Parameter.VAR_KEYWORD for parameter in parameters.values())


def _errors_sequence(value: Any) -> list[Any] | tuple[Any, ...] | None:
    if value is None:
        return None
    try:
        if isinstance(value, Mapping):
            entries = value.get("errors")
        else:
            entries = getattr(value, "errors", None)
    except Exception:
        logger.debug("Dropped unreadable errors sequence from %s", type(value).__name__, exc_info=True)
        return None
    if isinstance(entries, (list, tuple)):
        return entries
    return None


def _project_entries(entries: list[Any] | tuple[Any, ...], *, source: str | None) -> list[ErrorRecord]:
    return [ErrorRecord(**project_fields(entry, include_stack=True, source=source)) for entry in entries]
