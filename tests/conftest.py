"""Shared pytest fixtures for errenvelope test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

SETTINGS_ENV_VARS = (
    "ERRENVELOPE_CAPTURE_STACK",
    "ERRENVELOPE_STACK_LIMIT",
    "ERRENVELOPE_EXPOSE_STACK",
    "ERRENVELOPE_DEFAULT_HTTP_STATUS",
)


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test against default settings with a fresh settings cache."""
    from errenvelope.core.config import get_envelope_settings

    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_envelope_settings.cache_clear()
    yield
    get_envelope_settings.cache_clear()
