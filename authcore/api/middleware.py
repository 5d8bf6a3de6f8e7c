"""
HTTP middleware - Request logging with correlation IDs, and Prometheus metrics.

RequestLoggingMiddleware:
    - Takes X-Correlation-ID from the request or generates a UUID4
    - Logs one line on arrival and one on completion, both tagged with it
    - Echoes it back in the X-Correlation-ID response header
    - Exposes get_correlation_id() for log calls inside handlers

MetricsMiddleware:
    - Counts requests by method, route template and status
    - Observes request duration and tracks requests in flight
    - Skips /metrics and /health
"""

import logging
import time
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from authcore.api.metrics import (
    http_request_duration_seconds,
    http_requests_in_flight,
    http_requests_total,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
UNMETERED_PATHS = frozenset({"/metrics", "/health"})

correlation_id_context: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None outside a request."""
    return correlation_id_context.get()


def _route_path(request: Request) -> str:
    # Route template, or the raw path when nothing matched
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation ID and logs its start and end."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
        token = correlation_id_context.set(correlation_id)
        start = time.perf_counter()

        logger.info(
            "incoming_request method=%s path=%s ip=%s",
            request.method,
            request.url.path,
            request.client.host if request.client else "-",
            extra={
                "correlation_id": correlation_id,
                "user_agent": request.headers.get("user-agent", ""),
            },
        )
        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            logger.info(
                "request_completed status=%d duration=%.4fs",
                response.status_code,
                time.perf_counter() - start,
                extra={"correlation_id": correlation_id},
            )
            return response
        finally:
            correlation_id_context.reset(token)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request count, duration and in-flight gauge."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in UNMETERED_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        status = 500
        http_requests_in_flight.inc()
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            http_requests_in_flight.dec()
            path = _route_path(request)
            http_request_duration_seconds.labels(request.method, path).observe(
                time.perf_counter() - start
            )
            http_requests_total.labels(request.method, path, str(status)).inc()
