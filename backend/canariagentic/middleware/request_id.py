"""
CanarIAgentic Web - Request ID Middleware
=========================================

What:  Assigns a short correlation ID to each incoming request.
Why:   A visitor reporting "the form failed" can quote the ID shown in the
       response header; error bodies and every log line for that request
       carry the same value.
How:   Reuses a well-formed client-supplied X-Request-ID (Cloudflare workers
       and load balancers forward one), otherwise generates one; stores it in
       a ContextVar and echoes it in the response header.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Incoming IDs end up in log lines and JSON error bodies
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Coroutine-local: concurrent requests on the same event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accepted_request_id(value: str) -> bool:
    return bool(_ACCEPTED_ID.match(value))


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var for the request and adds X-Request-ID to the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        rid = incoming if accepted_request_id(incoming) else new_request_id()

        # Left set: the catch-all 500 handler runs outside this middleware
        # and reads the ID after dispatch returns
        request_id_var.set(rid)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
