"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

HTTP_REQUESTS_TOTAL = Counter(
    "orgtree_http_requests_total",
    "Total number of HTTP requests.",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "orgtree_http_request_duration_seconds",
    "HTTP request duration in seconds.",
    ["method", "route", "status"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

JOIN_PARENT_REQUESTS_TOTAL = Counter(
    "orgtree_join_parent_requests_total",
    "Join-parent request transitions by outcome.",
    ["outcome"],
)

NOTIFICATION_HOOK_FAILURES_TOTAL = Counter(
    "orgtree_notification_hook_failures_total",
    "Post-commit notification hooks that failed and were skipped.",
    ["hook"],
)


def observe_http_request(
    *,
    method: str,
    route: str,
    status_code: int,
    duration_ms: float,
) -> None:
    status = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=status).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(
        method=method, route=route, status=status
    ).observe(duration_ms / 1000.0)


def record_join_parent_request(outcome: str) -> None:
    JOIN_PARENT_REQUESTS_TOTAL.labels(outcome=outcome).inc()


def record_notification_failure(hook: str) -> None:
    NOTIFICATION_HOOK_FAILURES_TOTAL.labels(hook=hook).inc()
