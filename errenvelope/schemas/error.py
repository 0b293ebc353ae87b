"""Error envelope schemas shared by renderers and HTTP handlers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict

RECORD_FIELDS: tuple[str, ...] = ("message", "code", "source", "status", "details", "links")


class ErrorRecord(BaseModel):
    """Single whitelisted error entry within an envelope."""

    model_config = ConfigDict(frozen=True)

    message: str = ""
    code: str | None = None
    source: str | None = None
    status: int | None = None
    details: Any = None
    links: Any = None
    stack: str | None = None


class ErrorDocument(BaseModel):
    """Top-level multi-error wire document."""

    errors: list[ErrorRecord]
