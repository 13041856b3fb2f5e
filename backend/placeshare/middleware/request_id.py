"""
PlaceShare Backend — Request ID Middleware
============================================

What:  Assigns a correlation id to each request and returns it in X-Request-ID.
Why:   Error responses include the id, so a client report can be matched to
       the server-side log line holding the real failure detail.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates a short UUID; stores it in a ContextVar and request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # An upstream proxy or the frontend may already have assigned one
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        # The error handlers read the ContextVar; routes can use request.state
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        # Unhandled exceptions never reach this line; main.handle_unexpected_error
        # sets the header on that path itself
        response.headers["X-Request-ID"] = rid
        return response
