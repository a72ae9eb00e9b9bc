"""Logging middleware for correlation ID propagation.

Each request runs under the correlation id from its X-Correlation-ID
header (or a fresh one). The id is echoed back on the response and
copied into every log line the ballot service writes for the request.

Usage:
    from fastapi import FastAPI
    from ballotgate.api.middleware.logging_middleware import LoggingMiddleware

    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
"""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ballotgate.infrastructure.observability.correlation import (
    generate_correlation_id,
    set_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation ID propagation and request logging."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = (
            request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        )
        set_correlation_id(correlation_id)

        log = structlog.get_logger().bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
            caller_id=request.headers.get("X-Caller-Id"),
        )
        log.info("request_started")
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error_type=type(exc).__name__,
            )
            raise

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
