"""Prometheus metrics for shootwatch.

All collectors live in the default registry. The HTTP exporter is only
started when a metrics port is configured.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, start_http_server

cycles_total = Counter(
    "shootwatch_cycles_total",
    "Completed poll cycles by outcome.",
    ["outcome"],
)

change_events_total = Counter(
    "shootwatch_change_events_total",
    "Change events detected, including those suppressed during migration.",
    ["kind"],
)

notifications_total = Counter(
    "shootwatch_notifications_total",
    "Notification delivery attempts by channel and result.",
    ["channel", "success"],
)

snapshot_write_failures_total = Counter(
    "shootwatch_snapshot_write_failures_total",
    "Snapshot saves that failed.",
)

snapshot_clusters = Gauge(
    "shootwatch_snapshot_clusters",
    "Number of clusters in the most recently persisted snapshot.",
)


def start_metrics_server(port: int) -> None:
    """Expose the default registry on ``port``; a port of 0 is a no-op."""
    if port:
        start_http_server(port)
