"""
Prometheus metrics for the landing page service.
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_COUNT = Counter(
    "recoflag_requests_total",
    "Total HTTP requests",
    ["endpoint", "method", "status"],
)

REQUEST_DURATION = Histogram(
    "recoflag_request_duration_ms",
    "Request latency in milliseconds",
    ["endpoint"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
)

DEGRADATIONS = Counter(
    "recoflag_degraded_pages_total",
    "Pages served with the all-default view-model",
    ["reason"],  # configuration, flag_service_unavailable, invalid_input, internal_error
)

RECOMMENDATION_FETCHES = Counter(
    "recoflag_recommendation_fetches_total",
    "Recommendation API calls",
    ["outcome"],  # ok, fallback
)


def record_request(endpoint: str, method: str, status: int) -> None:
    """Increment the request counter."""
    REQUEST_COUNT.labels(endpoint=endpoint, method=method, status=str(status)).inc()


def observe_duration(endpoint: str, duration_ms: float) -> None:
    """Record request duration."""
    REQUEST_DURATION.labels(endpoint=endpoint).observe(duration_ms)


def record_degradation(reason: str) -> None:
    DEGRADATIONS.labels(reason=reason).inc()


def record_recommendation_fetch(outcome: str) -> None:
    RECOMMENDATION_FETCHES.labels(outcome=outcome).inc()


def metrics_response() -> tuple[bytes, str]:
    """Return (body, content_type) for the /metrics endpoint."""
    return generate_latest(), CONTENT_TYPE_LATEST
