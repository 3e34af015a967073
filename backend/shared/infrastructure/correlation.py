"""
Request Correlation Middleware.

Tags every request with an X-Request-ID and writes one access line per
request (method, path, status, duration), so the log lines of a single
order placement or kitchen poll can be grouped together.
"""

import time
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.logging import get_logger

logger = get_logger("rest_api.access")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Kitchen displays poll these every few seconds
QUIET_PATHS = frozenset({"/api/health", "/api/kitchen/pending"})


def get_request_id() -> str:
    return request_id_var.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Reuse the caller's X-Request-ID or generate one, expose it on the
    response and keep it in a context variable for the log filter.
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            log = logger.debug if request.url.path in QUIET_PATHS else logger.info
            log(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            request_id_var.reset(token)


class CorrelationIdFilter:
    """Logging filter that stamps request_id on every record ("-" outside a request)."""

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True
