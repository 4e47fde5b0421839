"""
Prometheus metrics for the catalog service.

Tracks request performance, authentication outcomes and record store I/O.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "catalog_http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "catalog_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.075,
        0.1,
        0.25,
        0.5,
        0.75,
        1.0,
        2.5,
        5.0,
    ),
)

# Authentication metrics
auth_signup_total = Counter("catalog_auth_signup_total", "Total user signups", ["status"])

auth_login_total = Counter("catalog_auth_login_total", "Total user logins", ["status"])

# Record store metrics
store_operations_total = Counter(
    "catalog_store_operations_total",
    "Total record store operations",
    ["collection", "operation", "status"],
)

store_operation_duration_seconds = Histogram(
    "catalog_store_operation_duration_seconds",
    "Record store operation duration in seconds",
    ["collection", "operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


def track_request_metrics(
    method: str, endpoint: str, status_code: int, duration: float
):
    """Track HTTP request metrics."""
    http_requests_total.labels(
        method=method, endpoint=endpoint, status=status_code
    ).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
        duration
    )


def track_signup(success: bool):
    """Track signup metrics."""
    status = "success" if success else "failure"
    auth_signup_total.labels(status=status).inc()


def track_login(success: bool):
    """Track login metrics."""
    status = "success" if success else "failure"
    auth_login_total.labels(status=status).inc()


def track_store_operation(collection: str, operation: str, success: bool, duration: float):
    """Track record store operation metrics."""
    status = "success" if success else "failure"
    store_operations_total.labels(
        collection=collection, operation=operation, status=status
    ).inc()
    store_operation_duration_seconds.labels(
        collection=collection, operation=operation
    ).observe(duration)


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
