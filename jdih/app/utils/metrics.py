"""Prometheus metrics for counters and feeds."""

from prometheus_client import Counter, Histogram

document_counter_increments_total = Counter(
    "document_counter_increments_total",
    "Document counter increments applied",
    ["counter"],
)

document_counter_failures_total = Counter(
    "document_counter_failures_total",
    "Document counter increments dropped",
    ["counter", "reason"],
)

document_counter_latency_ms = Histogram(
    "document_counter_latency_ms",
    "Counter increment latency in milliseconds",
    ["counter", "outcome"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000],
)

feed_records_served_total = Counter(
    "feed_records_served_total",
    "Records returned by the JDIHN feed endpoints",
    ["endpoint"],
)


class PrometheusCounterMetrics:
    """Prometheus-based counter metrics implementation."""

    def record_latency(self, counter: str, outcome: str, latency_ms: float) -> None:
        """Record increment latency."""
        document_counter_latency_ms.labels(counter=counter, outcome=outcome).observe(latency_ms)

    def inc_applied(self, counter: str) -> None:
        """Increment applied counter."""
        document_counter_increments_total.labels(counter=counter).inc()

    def inc_failure(self, counter: str, reason: str) -> None:
        """Increment failure counter."""
        document_counter_failures_total.labels(counter=counter, reason=reason).inc()


def record_feed_served(endpoint: str, count: int) -> None:
    """Count records served by a feed endpoint."""
    feed_records_served_total.labels(endpoint=endpoint).inc(count)
