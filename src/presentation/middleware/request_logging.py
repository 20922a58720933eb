"""
Per-request structured logging.

Each request produces one ``http_request`` event with its method, path,
status, duration and request id.  The request id is taken from the
caller's ``X-Request-ID`` header when present, bound into structlog's
context for the duration of the request, and echoed on the response.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from infrastructure.observability.logging_config import get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger("ebilling.request")


def _level_for(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one structured log event per HTTP request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        log = logger.bind(
            method=request.method,
            path=request.url.path,
            query=request.url.query or None,
            client_ip=request.client.host if request.client else None,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.error("http_request", status_code=500, duration_ms=self._elapsed_ms(started))
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        getattr(log, _level_for(response.status_code))(
            "http_request",
            request_id=request_id,
            status_code=response.status_code,
            duration_ms=self._elapsed_ms(started),
        )
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
