"""
Prometheus metrics for the preload cache.
"""
from prometheus_client import Counter, Histogram

PRELOAD_PREPARES = Counter(
    'stakeview_preload_prepares_total',
    'Total number of published preload refreshes',
    ['network']
)
PRELOAD_FAILURES = Counter(
    'stakeview_preload_failures_total',
    'Total number of failed preload refreshes',
    ['network', 'reason']
)
PRELOAD_STALE = Counter(
    'stakeview_preload_stale_total',
    'Preload results discarded because a newer snapshot was already published',
    ['network']
)
PRELOAD_FETCH_LATENCY = Histogram(
    'stakeview_preload_fetch_seconds',
    'Duration of preload data fetches in seconds',
    ['network']
)


def record_prepare(network_id: str, duration: float) -> None:
    PRELOAD_PREPARES.labels(network=network_id).inc()
    PRELOAD_FETCH_LATENCY.labels(network=network_id).observe(duration)


def record_failure(network_id: str, reason: str) -> None:
    PRELOAD_FAILURES.labels(network=network_id, reason=reason).inc()


def record_stale(network_id: str) -> None:
    PRELOAD_STALE.labels(network=network_id).inc()
