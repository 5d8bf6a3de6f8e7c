"""
Prometheus metrics for the account service.

Collectors live on a dedicated registry so importing the app more than
once (tests, reloaders) never registers the same metric twice on the
process-wide default registry.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

registry = CollectorRegistry()

http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed",
    ["method", "path", "status"],
    registry=registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "Histogram of HTTP request durations in seconds",
    ["method", "path"],
    registry=registry,
)

http_requests_in_flight = Gauge(
    "http_requests_in_flight",
    "Current number of HTTP requests being processed",
    registry=registry,
)


def render_latest() -> tuple[bytes, str]:
    """Exposition body and its content type."""
    return generate_latest(registry), CONTENT_TYPE_LATEST
