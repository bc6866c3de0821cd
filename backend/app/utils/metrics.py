"""Prometheus metrics for provider calls and plan generation."""

from prometheus_client import Counter, Histogram

# Provider call metrics
provider_latency_ms = Histogram(
    "provider_latency_ms",
    "External provider call latency in milliseconds",
    ["provider", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

provider_calls_total = Counter(
    "provider_calls_total",
    "Total external provider calls",
    ["provider", "outcome"],
)

# Plan generation metrics
plans_generated_total = Counter(
    "plans_generated_total",
    "Total travel plans generated",
    ["outcome"],
)


class PrometheusProviderMetrics:
    """Prometheus-based provider metrics implementation."""

    def record_call(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record one provider call and its latency."""
        provider_calls_total.labels(provider=provider, outcome=outcome).inc()
        provider_latency_ms.labels(provider=provider, outcome=outcome).observe(latency_ms)

    def record_plan(self, outcome: str) -> None:
        """Record a generated plan (complete, degraded or fallback)."""
        plans_generated_total.labels(outcome=outcome).inc()
