"""
CanarIAgentic Web - Access Log Middleware
=========================================

What:  One access log line per form or page request with status and duration.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

The visitor IP is resolved the same way as for submission records
(CF-Connecting-IP, then X-Forwarded-For, then the socket peer), so an access
line can be matched with the fallback record it produced.

Logged:     method, path, status, duration, visitor IP, request ID
Not logged: request bodies. Form contents only reach the log through the
            submission service's explicit fallback records.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from canariagentic.dependencies import resolve_client_ip
from canariagentic.middleware.request_id import request_id_var

logger = logging.getLogger("canariagentic.access")

# Uptime monitors hit the health route every few seconds; assets add nothing
QUIET_PATHS = frozenset({"/api/health", "/favicon.ico"})
QUIET_PREFIXES = ("/static/",)


def is_quiet(path: str) -> bool:
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        # Mostly form validation failures
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access line after the response is produced."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if is_quiet(path):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        visitor_ip = resolve_client_ip(request)
        rid = request_id_var.get("")
        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            visitor_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": visitor_ip,
            },
        )
        return response
