"""Prometheus metrics for document store writes."""

from prometheus_client import Counter, Histogram

# Store write metrics
store_write_latency_ms = Histogram(
    "store_write_latency_ms",
    "Document store write latency in milliseconds",
    ["operation", "outcome"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

store_write_conflicts_total = Counter(
    "store_write_conflicts_total",
    "Total optimistic-concurrency conflicts on document writes",
    ["operation"],
)

store_write_errors_total = Counter(
    "store_write_errors_total",
    "Total failed document writes",
    ["operation", "reason"],
)


class PrometheusWriteMetrics:
    """Prometheus-based store write metrics implementation."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record write latency."""
        store_write_latency_ms.labels(operation=operation, outcome=outcome).observe(latency_ms)

    def inc_conflict(self, operation: str) -> None:
        """Increment conflict counter."""
        store_write_conflicts_total.labels(operation=operation).inc()

    def inc_error(self, operation: str, reason: str) -> None:
        """Increment error counter."""
        store_write_errors_total.labels(operation=operation, reason=reason).inc()
