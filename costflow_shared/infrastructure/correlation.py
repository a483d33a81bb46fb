"""
Request correlation.

Every HTTP request gets an ID, taken from the caller's X-Request-ID header
or generated, which is echoed back on the response and stamped on every
log record emitted while the request is handled.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Longer caller-supplied IDs are cut to this length
MAX_REQUEST_ID_LENGTH = 64

_current_request_id: ContextVar[str | None] = ContextVar("costflow_request_id", default=None)


def current_request_id() -> str | None:
    """ID of the request being handled, or None outside a request (CLI, startup)."""
    return _current_request_id.get()


def _incoming_id(request: Request) -> str:
    supplied = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    return supplied[:MAX_REQUEST_ID_LENGTH] if supplied else uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_id(request)
        token = _current_request_id.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            _current_request_id.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class CorrelationIdFilter(logging.Filter):
    """Adds `request_id` to records; "-" outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id() or "-"
        return True
