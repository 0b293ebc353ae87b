"""Multi-error envelopes for uniform cross-service error reporting."""

from errenvelope.core.errors import ErrorEnvelope
from errenvelope.factories import STATUS_FACTORIES
from errenvelope.factories import bad_request
from errenvelope.factories import build_error
from errenvelope.factories import forbidden
from errenvelope.factories import internal_server_error
from errenvelope.factories import method_not_allowed
from errenvelope.factories import not_found
from errenvelope.factories import service_unavailable
from errenvelope.factories import unauthorized
from errenvelope.schemas.error import ErrorDocument
from errenvelope.schemas.error import ErrorRecord
from errenvelope.services.normalizer import SupportsStructuredErrors
from errenvelope.services.normalizer import is_error_like
from errenvelope.services.normalizer import normalize

__all__ = [
    "STATUS_FACTORIES",
    "ErrorDocument",
    "ErrorEnvelope",
    "ErrorRecord",
    "SupportsStructuredErrors",
    "bad_request",
    "build_error",
    "forbidden",
    "internal_server_error",
    "is_error_like",
    "method_not_allowed",
    "normalize",
    "not_found",
    "service_unavailable",
    "unauthorized",
]
