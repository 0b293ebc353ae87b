"""FastAPI exception handler registration for error envelopes."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi import status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from errenvelope.core.config import get_envelope_settings
from errenvelope.core.errors import ErrorEnvelope
from errenvelope.core.serialization import safe_stringify
from errenvelope.factories import bad_request
from errenvelope.factories import code_for_status
from errenvelope.factories import internal_server_error

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def _response_status(envelope: ErrorEnvelope) -> int:
    candidate = envelope.status
    if candidate is not None and 400 <= candidate <= 599:
        return candidate
    return get_envelope_settings().default_http_status


def build_error_response(envelope: ErrorEnvelope, *, status_code: int | None = None) -> Response:
    """Render ``envelope`` as a JSON response, using its head status unless overridden."""
    settings = get_envelope_settings()
    payload = envelope.to_structured(include_stack=settings.expose_stack)
    return Response(
        content=safe_stringify(payload),
        status_code=status_code if status_code is not None else _response_status(envelope),
        media_type=JSON_MEDIA_TYPE,
    )


async def error_envelope_handler(_: Request, exc: ErrorEnvelope) -> Response:
    """Return raised envelopes as their structured document."""

    return build_error_response(exc)


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> Response:
    """Normalize FastAPI validation errors to a bad-request envelope."""

    envelope = bad_request("Request validation failed", details=list(exc.errors()), source="request")
    return build_error_response(envelope)


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> Response:
    """Normalize HTTP exceptions to an envelope carrying their status."""

    message = exc.detail if isinstance(exc.detail, str) and exc.detail else "Request failed"
    details = exc.detail if isinstance(exc.detail, (dict, list)) else None
    envelope = ErrorEnvelope(
        message,
        code=code_for_status(exc.status_code),
        status=exc.status_code,
        details=details,
        with_stack=False,
    )
    return build_error_response(envelope, status_code=exc.status_code)


async def unhandled_exception_handler(_: Request, exc: Exception) -> Response:
    """Avoid leaking internal exceptions while keeping the document shape stable."""

    logger.exception("Unhandled exception rendered as internal error", exc_info=exc)
    return build_error_response(
        internal_server_error("Internal server error"),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all envelope error handlers to a FastAPI app instance."""

    logger.debug("Registering envelope error handlers with settings=%s", get_envelope_settings().safe_for_logging())
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ErrorEnvelope, error_envelope_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
