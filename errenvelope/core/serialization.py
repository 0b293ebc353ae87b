"""Clone, JSON and call-stack helpers used by the envelope core."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any
import copy
import json
import math
import os
import traceback

CIRCULAR_MARKER = "[Circular]"
STACK_FRAME_PREFIX = "    at "

_PACKAGE_DIR = str(Path(__file__).resolve().parents[1]) + os.sep
_JSON_KEY_TYPES = (str, int, float, bool, type(None))
_NON_FINITE_KEYS = {math.inf: "Infinity", -math.inf: "-Infinity"}


def clone(value: Any) -> Any:
    """Deep-copy a structured value; ``None`` stays ``None``."""
    if value is None:
        return None
    return copy.deepcopy(value)


def safe_stringify(value: Any, indent: int | None = None) -> str:
    """Serialize ``value`` to JSON text without failing on cycles or foreign objects."""
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        _decycle(value, frozenset()),
        indent=indent,
        separators=separators,
        ensure_ascii=False,
        allow_nan=False,
        default=_fallback,
    )


def _decycle(value: Any, ancestors: frozenset[int]) -> Any:
    if isinstance(value, Mapping):
        if id(value) in ancestors:
            return CIRCULAR_MARKER
        nested = ancestors | {id(value)}
        return {_json_key(key): _decycle(item, nested) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        if id(value) in ancestors:
            return CIRCULAR_MARKER
        nested = ancestors | {id(value)}
        return [_decycle(item, nested) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _json_key(key: Any) -> Any:
    if isinstance(key, float) and not math.isfinite(key):
        return _NON_FINITE_KEYS.get(key, "NaN")
    if isinstance(key, _JSON_KEY_TYPES):
        return key
    return _fallback(key)


def _fallback(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unserializable {type(value).__name__}>"


def capture_stack(header: str, limit: int | None = None) -> str:
    """Return the current call stack as a header line plus ``    at`` frame lines."""
    frames = [frame for frame in traceback.extract_stack() if not _is_internal(frame.filename)]
    frames.reverse()
    if limit is not None:
        frames = frames[:limit]
    return _format_frames(header, frames)


def format_exception_stack(exc: BaseException, limit: int | None = None) -> str | None:
    """Format a raised exception's traceback in the same shape as ``capture_stack``."""
    if exc.__traceback__ is None:
        return None
    frames = list(traceback.extract_tb(exc.__traceback__))
    frames.reverse()
    if limit is not None:
        frames = frames[:limit]
    text = _fallback(exc)
    header = f"{type(exc).__name__}: {text}" if text else type(exc).__name__
    return _format_frames(header, frames)


def stack_frame_lines(stack: str) -> list[str]:
    """Return only the frame lines of a formatted stack, dropping its header."""
    return [line for line in stack.splitlines() if line.startswith(STACK_FRAME_PREFIX)]


def _format_frames(header: str, frames: list[traceback.FrameSummary]) -> str:
    lines = [header]
    lines.extend(f"{STACK_FRAME_PREFIX}{frame.name} ({frame.filename}:{frame.lineno})" for frame in frames)
    return "\n".join(lines)


def _is_internal(filename: str) -> bool:
    return filename.startswith(_PACKAGE_DIR)
