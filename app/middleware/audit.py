"""Request audit logging middleware — logs every state-changing request.

Domain status changes are written to the audit_trail table by
app.services.review; this middleware only records the HTTP side (who called
what, result, latency) in the application log.
"""


import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app.audit")

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

class AuditMiddleware(BaseHTTPMiddleware):
    """Logs all write operations with caller, status code and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method not in _WRITE_METHODS:
            return await call_next(request)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s → %s (%sms) caller=%s role=%s ip=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request.headers.get("x-caller-id", "-"),
            request.headers.get("x-caller-role", "-"),
            request.client.host if request.client else "-",
        )
        return response
