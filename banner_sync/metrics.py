"""
Prometheus metrics for the banner sync service.

Metrics exposed:
- Provider fetch success/failure counters per provider and sport
- Banner write success/failure counters per storage operation
- Auto-sync running gauge
"""
from prometheus_client import Counter, Gauge

provider_fetch_success_total = Counter(
    "provider_fetch_success_total",
    "Total successful scoreboard fetches",
    ["provider", "sport"],
)

provider_fetch_failures_total = Counter(
    "provider_fetch_failures_total",
    "Total failed scoreboard fetches",
    ["provider", "sport"],
)

banner_writes_total = Counter(
    "banner_writes_total",
    "Total banner writes applied to storage",
    ["operation"],
)

banner_write_failures_total = Counter(
    "banner_write_failures_total",
    "Total banner writes rejected by storage",
    ["operation"],
)

banner_sync_running = Gauge(
    "banner_sync_running",
    "Whether auto-sync is running (1=running, 0=stopped)",
)


def record_fetch_success(provider: str, sport: str) -> None:
    provider_fetch_success_total.labels(provider=provider, sport=sport).inc()


def record_fetch_failure(provider: str, sport: str) -> None:
    provider_fetch_failures_total.labels(provider=provider, sport=sport).inc()


def record_write(operation: str) -> None:
    banner_writes_total.labels(operation=operation).inc()


def record_write_failure(operation: str) -> None:
    banner_write_failures_total.labels(operation=operation).inc()


def set_sync_running(running: bool) -> None:
    banner_sync_running.set(1 if running else 0)
