"""Prometheus metrics for external store calls and degraded reads."""

from prometheus_client import Counter, Histogram

# Store request metrics
store_request_latency_ms = Histogram(
    "store_request_latency_ms",
    "External store request latency in milliseconds",
    ["method", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

store_errors_total = Counter(
    "store_errors_total",
    "Total external store request errors",
    ["method", "reason"],
)

catalog_fallbacks_total = Counter(
    "catalog_fallbacks_total",
    "Catalog fetches that degraded to a fallback list",
    ["catalog"],
)


class PrometheusStoreMetrics:
    """Prometheus-based store metrics implementation."""

    def record_latency(self, method: str, outcome: str, latency_ms: float) -> None:
        """Record store request latency."""
        store_request_latency_ms.labels(method=method, outcome=outcome).observe(latency_ms)

    def inc_error(self, method: str, reason: str) -> None:
        """Increment error counter."""
        store_errors_total.labels(method=method, reason=reason).inc()

    def inc_catalog_fallback(self, catalog: str) -> None:
        """Increment catalog fallback counter."""
        catalog_fallbacks_total.labels(catalog=catalog).inc()
