"""
Request middleware: request IDs, access logging and HTTP metrics.

The request ID comes from ``X-Request-ID`` (or ``X-Correlation-ID``) when the
caller sends one and is echoed back on the response, so a client can match
its request to the ``search_complete`` log line it produced.
"""

import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .logging import get_logger, correlation_id_context
from .metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATH_PREFIXES = ("/health", "/metrics")

_NUMERIC_SEGMENT = re.compile(r"/\d+")


class ObservabilityMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, enable_request_logging: bool = True, slow_request_seconds: float = 5.0):
        super().__init__(app)
        self.enable_request_logging = enable_request_logging
        # A search may wait on a primary and a fallback upstream fetch
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming_id = request.headers.get(REQUEST_ID_HEADER) or request.headers.get("X-Correlation-ID")
        endpoint = _NUMERIC_SEGMENT.sub("/{id}", request.url.path)
        method = request.method
        log_access = self.enable_request_logging and not request.url.path.startswith(QUIET_PATH_PREFIXES)

        with correlation_id_context(incoming_id) as request_id:
            request.state.correlation_id = request_id
            in_progress = http_requests_in_progress.labels(method=method, endpoint=endpoint)
            in_progress.inc()
            started = time.time()
            try:
                if log_access:
                    logger.info(
                        f"{method} {request.url.path}",
                        extra={"method": method, "path": endpoint, "query_present": bool(request.url.query)},
                    )
                response = await call_next(request)
            except Exception as exc:
                self._observe(method, endpoint, 500, time.time() - started)
                logger.error(
                    "Request failed",
                    extra={"method": method, "path": endpoint, "error_type": type(exc).__name__},
                    exc_info=True,
                )
                raise
            finally:
                in_progress.dec()

            duration = time.time() - started
            self._observe(method, endpoint, response.status_code, duration)
            response.headers[REQUEST_ID_HEADER] = request_id

            if log_access:
                self._log_completion(method, endpoint, response.status_code, duration)
            return response

    def _observe(self, method: str, endpoint: str, status: int, duration: float) -> None:
        http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    def _log_completion(self, method: str, endpoint: str, status: int, duration: float) -> None:
        fields = {
            "method": method,
            "path": endpoint,
            "status_code": status,
            "duration_seconds": round(duration, 3),
        }
        if duration > self.slow_request_seconds:
            logger.warning("Slow request detected", extra=fields)
        elif status >= 500:
            logger.warning("Request completed with server error", extra=fields)
        else:
            logger.info("Request completed", extra=fields)
