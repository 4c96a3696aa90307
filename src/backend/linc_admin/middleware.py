"""Request ID middleware for the LINC admin console.

Reuses the caller's X-Request-ID when present, otherwise generates a UUID4.
The id is stored in a ContextVar so the upstream API client can forward it,
and is attached as an X-Request-ID response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Module-level ContextVar, readable from services and the API client
# without needing the Request object.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    return request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets the request id ContextVar and adds the X-Request-ID header to
    every response."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = req_id
        return response
