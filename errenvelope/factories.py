"""Convenience constructors for common HTTP status classes."""

from __future__ import annotations

from typing import Any

from fastapi import status as http_status

from errenvelope.core.errors import ErrorEnvelope
from errenvelope.services.normalizer import TextInput
from errenvelope.services.normalizer import classify_input
from errenvelope.services.normalizer import project_fields

STATUS_FACTORIES: dict[str, tuple[str, int]] = {
    "unauthorized": ("UNAUTHORIZED", http_status.HTTP_401_UNAUTHORIZED),
    "bad_request": ("BAD_REQUEST", http_status.HTTP_400_BAD_REQUEST),
    "forbidden": ("FORBIDDEN", http_status.HTTP_403_FORBIDDEN),
    "not_found": ("NOT_FOUND", http_status.HTTP_404_NOT_FOUND),
    "internal_server_error": ("INTERNAL_SERVER_ERROR", http_status.HTTP_500_INTERNAL_SERVER_ERROR),
    "method_not_allowed": ("METHOD_NOT_ALLOWED", http_status.HTTP_405_METHOD_NOT_ALLOWED),
    "service_unavailable": ("SERVICE_UNAVAILABLE", http_status.HTTP_503_SERVICE_UNAVAILABLE),
}


def build_error(
    value: Any = None,
    *,
    code: str,
    status: int,
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Build an envelope with a fixed ``status`` and a default ``code``.

    Non-text input is projected first; its own ``code`` wins over the default
    while ``status`` is always the one given here.
    """
    variant = classify_input(value)
    if variant is not None and not isinstance(variant, TextInput):
        options = project_fields(value)
        options["status"] = status
        if not options.get("code"):
            options["code"] = code
        value = options
    return ErrorEnvelope(value, code, source, details, status, links)


def unauthorized(
    value: Any = None,
    code: str = "UNAUTHORIZED",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 401 Unauthorized response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_401_UNAUTHORIZED,
        source=source,
        details=details,
        links=links,
    )


def bad_request(
    value: Any = None,
    code: str = "BAD_REQUEST",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 400 Bad Request response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_400_BAD_REQUEST,
        source=source,
        details=details,
        links=links,
    )


def forbidden(
    value: Any = None,
    code: str = "FORBIDDEN",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 403 Forbidden response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_403_FORBIDDEN,
        source=source,
        details=details,
        links=links,
    )


def not_found(
    value: Any = None,
    code: str = "NOT_FOUND",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 404 Not Found response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_404_NOT_FOUND,
        source=source,
        details=details,
        links=links,
    )


def internal_server_error(
    value: Any = None,
    code: str = "INTERNAL_SERVER_ERROR",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 500 Internal Server Error response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        source=source,
        details=details,
        links=links,
    )


def method_not_allowed(
    value: Any = None,
    code: str = "METHOD_NOT_ALLOWED",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 405 Method Not Allowed response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_405_METHOD_NOT_ALLOWED,
        source=source,
        details=details,
        links=links,
    )


def service_unavailable(
    value: Any = None,
    code: str = "SERVICE_UNAVAILABLE",
    source: str | None = None,
    details: Any = None,
    links: Any = None,
) -> ErrorEnvelope:
    """Return an envelope for a 503 Service Unavailable response."""
    return build_error(
        value,
        code=code,
        status=http_status.HTTP_503_SERVICE_UNAVAILABLE,
        source=source,
        details=details,
        links=links,
    )


def code_for_status(status_code: int) -> str:
    """Return the factory code matching ``status_code``, falling back by status class."""
    for code, status in STATUS_FACTORIES.values():
        if status == status_code:
            return code
    if status_code >= http_status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "INTERNAL_SERVER_ERROR"
    return "BAD_REQUEST"
