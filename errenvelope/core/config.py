"""Library configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_CAPTURE_STACK = True
DEFAULT_STACK_LIMIT = 50
DEFAULT_EXPOSE_STACK = False
DEFAULT_HTTP_STATUS = 500

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class SettingsError(ValueError):
    """Raised when an environment variable cannot be parsed."""


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise SettingsError(f"{name} must be a boolean flag, got {raw!r}")


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SettingsError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class EnvelopeSettings:
    """Runtime settings for envelope construction and HTTP rendering."""

    capture_stack: bool
    stack_limit: int
    expose_stack: bool
    default_http_status: int

    def safe_for_logging(self) -> dict[str, bool | int]:
        """Return settings as a plain dict for log lines."""
        return {
            "capture_stack": self.capture_stack,
            "stack_limit": self.stack_limit,
            "expose_stack": self.expose_stack,
            "default_http_status": self.default_http_status,
        }


@lru_cache(maxsize=1)
def get_envelope_settings() -> EnvelopeSettings:
    """Load envelope settings from the environment."""
    stack_limit = _get_int_env("ERRENVELOPE_STACK_LIMIT", DEFAULT_STACK_LIMIT)
    if stack_limit < 0:
        raise SettingsError("ERRENVELOPE_STACK_LIMIT must be >= 0")

    return EnvelopeSettings(
        capture_stack=_get_bool_env("ERRENVELOPE_CAPTURE_STACK", DEFAULT_CAPTURE_STACK),
        stack_limit=stack_limit,
        expose_stack=_get_bool_env("ERRENVELOPE_EXPOSE_STACK", DEFAULT_EXPOSE_STACK),
        default_http_status=_get_int_env("ERRENVELOPE_DEFAULT_HTTP_STATUS", DEFAULT_HTTP_STATUS),
    )
