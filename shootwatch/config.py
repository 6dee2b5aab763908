"""Configuration loading from environment variables and CLI overrides."""

from __future__ import annotations

import os

from shootwatch.errors import ConfigError
from shootwatch.models.config import (
    GardenConfig,
    LogConfig,
    MetricsConfig,
    NotificationConfig,
    PollConfig,
    ShootwatchConfig,
    SnapshotConfig,
)

_WEBHOOK_FORMATS = {"slack", "json"}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"SHOOTWATCH_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ConfigError(f"SHOOTWATCH_{key} must be an integer, got: {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float) -> float:
    raw = _env(key, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"SHOOTWATCH_{key} must be a number, got: {raw!r}") from exc


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigError(f"Invalid log level: {value}. Must be one of {sorted(valid)}")
    return value.lower()


def _validate_webhook_format(value: str) -> str:
    if value.lower() not in _WEBHOOK_FORMATS:
        raise ConfigError(f"Invalid webhook format: {value}. Must be one of {sorted(_WEBHOOK_FORMATS)}")
    return value.lower()


def load_config(
    *,
    kubeconfig: str | None = None,
    webhook_url: str | None = None,
    filename: str | None = None,
    interval: int | None = None,
    webhook_format: str | None = None,
    log_level: str | None = None,
) -> ShootwatchConfig:
    """Load configuration from SHOOTWATCH_* environment variables.

    Keyword arguments that are not ``None`` (typically command-line flags)
    take precedence over the environment.
    """
    poll_interval = interval if interval is not None else _env_int("POLL_INTERVAL", 60)
    return ShootwatchConfig(
        garden=GardenConfig(
            kubeconfig_path=kubeconfig if kubeconfig is not None else _env("KUBECONFIG", ""),
            request_timeout_seconds=_env_int("GARDEN_TIMEOUT", 30, min_val=5, max_val=300),
        ),
        notifications=NotificationConfig(
            webhook_url=webhook_url if webhook_url is not None else _env("WEBHOOK_URL", ""),
            webhook_format=_validate_webhook_format(
                webhook_format if webhook_format is not None else _env("WEBHOOK_FORMAT", "slack")
            ),
            timeout_seconds=_env_float("WEBHOOK_TIMEOUT", 10.0),
        ),
        snapshot=SnapshotConfig(
            path=filename if filename is not None else _env("SNAPSHOT_PATH", "shoots.json"),
        ),
        poll=PollConfig(interval_seconds=max(poll_interval, 1)),
        metrics=MetricsConfig(
            port=_env_int("METRICS_PORT", 0, min_val=0, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(log_level if log_level is not None else _env("LOG_LEVEL", "info")),
        ),
    )


def validate_config(config: ShootwatchConfig) -> None:
    """Reject configurations that cannot possibly run.

    Raises:
        ConfigError: if a kubeconfig path is given but does not exist, the
            webhook URL is missing, or the snapshot path is empty.
    """
    kubeconfig = config.garden.kubeconfig_path
    if kubeconfig and not os.path.exists(kubeconfig):
        raise ConfigError(f"kubeconfig does not exist on path {kubeconfig}")
    if not config.notifications.webhook_url:
        raise ConfigError("A webhook URL is required (--webhook-url or SHOOTWATCH_WEBHOOK_URL)")
    if not config.snapshot.path:
        raise ConfigError("A snapshot file path is required (--filename or SHOOTWATCH_SNAPSHOT_PATH)")
