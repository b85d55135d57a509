"""
LeafNotes Backend — Request Logging Middleware
================================================

What:  One access-log line per HTTP request: method, path, status, duration,
       request ID and client address.
How:   Measures time around call_next() and picks the log level from the
       response status (5xx ERROR, 4xx WARNING, otherwise INFO).
Who:   Applied to every request via Starlette middleware, after
       RequestIDMiddleware so the request ID is available.

Privacy:
    Request bodies are never logged: they hold note contents. Paths under
    /api/shared/ are logged with the token masked, since the token alone
    grants read access to a note.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from leafnotes.middleware.request_id import request_id_var

logger = logging.getLogger("leafnotes.access")

SHARED_PREFIX = "/api/shared/"

# Probe endpoints excluded from the access log
QUIET_PATHS = {"/health"}


def loggable_path(path: str) -> str:
    """Path as written to the access log, with share tokens masked."""
    if path.startswith(SHARED_PREFIX) and len(path) > len(SHARED_PREFIX):
        return SHARED_PREFIX + "***"
    return path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        shown_path = loggable_path(path)
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            shown_path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": shown_path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
