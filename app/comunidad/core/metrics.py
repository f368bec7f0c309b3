from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.comunidad.core.config import settings

LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000)


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    """Prometheus collectors on a private registry, no-ops when disabled."""

    def __init__(self, enabled: bool | None = None) -> None:
        self.enabled = bool(settings.METRICS_ENABLED if enabled is None else enabled)
        self._registry: CollectorRegistry | None = None
        if self.enabled:
            self._build()

    def _build(self) -> None:
        registry = CollectorRegistry()
        labels = ["route", "method", "status"]
        self._http_requests_total = Counter(
            "http_requests_total", "HTTP requests by route/method/status.", labels, registry=registry
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            labels,
            buckets=LATENCY_BUCKETS_MS,
            registry=registry,
        )
        self._entity_mutations_total = Counter(
            "entity_mutations_total",
            "Committed entity mutations by entity and action.",
            ["entity", "action"],
            registry=registry,
        )
        self._service_errors_total = Counter(
            "service_errors_total", "Failed service operations by error code.", ["code"], registry=registry
        )
        self._registry = registry

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def record_entity_mutation(self, entity: str, action: str) -> None:
        if self.enabled:
            self._entity_mutations_total.labels(entity=entity, action=action).inc()

    def increment_service_error(self, code: str) -> None:
        if self.enabled:
            self._service_errors_total.labels(code=code).inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
