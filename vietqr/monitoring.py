"""Prometheus metrics for the HTTP layer and payload generation."""
from __future__ import annotations

from typing import Final

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

NAMESPACE: Final = "vietqr"

HTTP_REQUESTS: Final = Counter(
    "http_requests_total",
    "HTTP requests by route and status",
    labelnames=("method", "route", "status"),
    namespace=NAMESPACE,
)
HTTP_LATENCY: Final = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    labelnames=("method", "route"),
    namespace=NAMESPACE,
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5),
)
SERVICE_ERRORS: Final = Counter(
    "service_errors_total",
    "Service errors by error code",
    labelnames=("code", "route"),
    namespace=NAMESPACE,
)
PAYLOADS_GENERATED: Final = Counter(
    "payloads_generated_total",
    "Payloads generated, static (11) or dynamic (12)",
    labelnames=("point_of_initiation",),
    namespace=NAMESPACE,
)
PAYLOAD_LENGTH: Final = Histogram(
    "payload_length_chars",
    "Length of generated payloads in characters",
    namespace=NAMESPACE,
    buckets=(80, 120, 160, 200, 256, 512),
)


def observe_request(method: str, route: str, status_code: int, duration_ms: float) -> None:
    HTTP_REQUESTS.labels(method=method, route=route, status=str(status_code)).inc()
    HTTP_LATENCY.labels(method=method, route=route).observe(duration_ms / 1000)


def record_service_error(code: str, route: str) -> None:
    SERVICE_ERRORS.labels(code=code, route=route).inc()


def record_payload_generated(point_of_initiation: str, length: int) -> None:
    PAYLOADS_GENERATED.labels(point_of_initiation=point_of_initiation).inc()
    PAYLOAD_LENGTH.observe(length)


def metrics_payload() -> tuple[bytes, str]:
    """Return Prometheus exposition payload and content type."""

    return generate_latest(), CONTENT_TYPE_LATEST
