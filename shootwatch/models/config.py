"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GardenConfig:
    """Garden cluster API access."""

    kubeconfig_path: str = ""
    request_timeout_seconds: int = 30


@dataclass
class NotificationConfig:
    """Notification delivery configuration."""

    webhook_url: str = ""
    webhook_format: str = "slack"
    timeout_seconds: float = 10.0


@dataclass
class SnapshotConfig:
    """Snapshot file configuration."""

    path: str = "shoots.json"


@dataclass
class PollConfig:
    """Poll loop configuration."""

    interval_seconds: int = 60


@dataclass
class MetricsConfig:
    """Prometheus exporter configuration. Port 0 disables the exporter."""

    port: int = 0


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class ShootwatchConfig:
    """Top-level shootwatch configuration."""

    garden: GardenConfig = field(default_factory=GardenConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    poll: PollConfig = field(default_factory=PollConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    log: LogConfig = field(default_factory=LogConfig)
