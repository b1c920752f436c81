"""Prometheus metrics for itinerary generation and persistence."""

from prometheus_client import Counter, Histogram

generation_latency_ms = Histogram(
    "itinerary_generation_latency_ms",
    "Generation provider call latency in milliseconds",
    ["outcome"],
    buckets=[250, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

generation_errors_total = Counter(
    "itinerary_generation_errors_total",
    "Total generation provider failures",
    ["kind"],
)

malformed_responses_total = Counter(
    "itinerary_malformed_responses_total",
    "Total generation outputs that failed schema decoding",
)

reconciliations_total = Counter(
    "itinerary_reconciliations_total",
    "Total reconciled itineraries by day-count adjustment",
    ["action"],
)

persistence_total = Counter(
    "itinerary_persistence_total",
    "Total background itinerary saves by outcome",
    ["outcome"],
)


class PrometheusPipelineMetrics:
    """Prometheus-based pipeline metrics implementation."""

    def record_generation(self, outcome: str, latency_ms: float) -> None:
        """Record generation call latency."""
        generation_latency_ms.labels(outcome=outcome).observe(latency_ms)

    def inc_generation_error(self, kind: str) -> None:
        """Increment generation error counter."""
        generation_errors_total.labels(kind=kind).inc()

    def inc_malformed(self) -> None:
        """Increment malformed response counter."""
        malformed_responses_total.inc()

    def inc_reconciliation(self, action: str) -> None:
        """Increment reconciliation counter."""
        reconciliations_total.labels(action=action).inc()

    def inc_persistence(self, outcome: str) -> None:
        """Increment persistence outcome counter (saved, failed, dropped)."""
        persistence_total.labels(outcome=outcome).inc()
