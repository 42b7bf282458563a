"""Middleware for security headers and request logging."""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from orgtree.core.metrics import observe_http_request
from orgtree.core.structured_logging import correlation_context, log_json, new_correlation_id

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add basic security headers to all responses."""

    def __init__(self, app: ASGIApp, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")

        if self.environment == "production":
            forwarded_proto = request.headers.get("x-forwarded-proto")
            scheme = forwarded_proto or request.url.scheme
            if scheme == "https":
                response.headers.setdefault(
                    "Strict-Transport-Security",
                    "max-age=63072000; includeSubDomains",
                )

        return response


def _incoming_request_id(request: Request) -> str | None:
    candidate = request.headers.get("X-Request-ID") or request.headers.get("X-Correlation-ID")
    if not candidate:
        return None
    candidate = candidate.strip()
    if not candidate or len(candidate) > 128 or "\n" in candidate or "\r" in candidate:
        return None
    return candidate


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware with structured logging.

    Logs method, path, status code, duration and client IP as one JSON line,
    records the HTTP metrics and binds the request id for every log line
    emitted while the request is handled.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = _incoming_request_id(request) or new_correlation_id()
        request.state.request_id = request_id

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        with correlation_context(request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start_time) * 1000
                log_json(
                    logger,
                    logging.ERROR,
                    "request_error",
                    method=method,
                    path=path,
                    status_code=500,
                    duration_ms=round(duration_ms, 2),
                    client_ip=client_ip,
                    error=str(exc),
                    exception=exc.__class__.__name__,
                )
                raise

            response.headers.setdefault("X-Request-ID", request_id)
            duration_ms = (time.perf_counter() - start_time) * 1000

            route_obj = request.scope.get("route")
            route_template = getattr(route_obj, "path", None) or "unmatched"
            observe_http_request(
                method=method,
                route=route_template,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO

            log_json(
                logger,
                level,
                "request",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                client_ip=client_ip,
            )

            return response
