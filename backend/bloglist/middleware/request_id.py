"""
Blog List Backend — Request ID Middleware
===========================================

What:  Assigns a correlation id to each request and echoes it in `X-Request-ID`.
Why:   Every log line and every error body for one request shares the id, so a
       client-reported failure can be found in the logs.
How:   Uses the client's `X-Request-ID` when present (truncated to 64 chars),
       otherwise generates a short UUID prefix. Stored in a ContextVar for
       loggers and exception handlers, and in request.state for handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

MAX_REQUEST_ID_LENGTH = 64


def _new_request_id() -> str:
    # 8 hex chars are enough to correlate log lines and easy to read
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get("X-Request-ID", "").strip()
        rid = supplied[:MAX_REQUEST_ID_LENGTH] if supplied else _new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
