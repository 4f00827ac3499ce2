"""Request correlation IDs.

Each request gets an ``X-Request-ID``: the client's value when it is
usable, a fresh UUID otherwise. The ID lives in a context variable for
the duration of the request so error responses and log records can
carry it without the request object being passed around.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default=""
)


def get_request_id() -> str:
    """Return the current request's ID, or an empty string outside a request."""
    return request_id_var.get()


def _clean_request_id(raw: str | None) -> str:
    """
    Accept a client-supplied request ID or replace it.

    Missing values and values with characters outside printable ASCII are
    replaced by a new UUID4; overlong values are cut to
    ``MAX_REQUEST_ID_LENGTH`` keeping the prefix.
    """
    if not raw:
        return str(uuid.uuid4())
    if not all(33 <= ord(c) <= 126 for c in raw):
        logger.warning("Rejected X-Request-ID with non-printable characters")
        return str(uuid.uuid4())
    return raw[:MAX_REQUEST_ID_LENGTH]


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the request context and echo it in the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = _clean_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(request_id)
        try:
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


class RequestIdFilter(logging.Filter):
    """Logging filter exposing ``%(request_id)s`` to formatters ("-" if unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True
