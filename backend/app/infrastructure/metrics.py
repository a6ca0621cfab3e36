"""API Metrics: Prometheus registry, request counter and the counting middleware.

Invariants:
    - One CollectorRegistry per ApiMetrics instance (no prometheus_client global REGISTRY)
    - http_requests_api_total{method} increments once per request whose path starts with the API prefix
    - The increment happens before dispatch, so it counts failures and 404s too
    - Non-API paths (/metrics, /health, static files) never touch the counter

Design Decisions:
    - Registry passed explicitly through app.state.metrics instead of module globals,
      so every app instance (and every test) starts from zero
    - Process/platform/GC collectors registered alongside the counter
"""

from fastapi import FastAPI, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


class ApiMetrics:
    """Holds the registry and the metrics the service exports."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)
        self.api_requests = Counter(
            "http_requests_api_total",
            "Count of API calls",
            labelnames=("method",),
            registry=self.registry,
        )

    def count_request(self, method: str) -> None:
        self.api_requests.labels(method=method.upper()).inc()

    def api_request_count(self, method: str) -> float:
        value = self.registry.get_sample_value(
            "http_requests_api_total", {"method": method.upper()},
        )
        return value or 0.0

    def render(self) -> bytes:
        return generate_latest(self.registry)


def register_metrics_middleware(
    app: FastAPI, metrics: ApiMetrics, prefix: str = "/api",
) -> None:
    """Count every request under `prefix`, before routing."""

    @app.middleware("http")
    async def count_api_requests(request: Request, call_next):
        if request.url.path.startswith(prefix):
            metrics.count_request(request.method)
        return await call_next(request)
