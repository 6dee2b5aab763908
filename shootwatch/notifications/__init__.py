"""Notification system for shootwatch.

Turns ChangeEvent instances into single messages and posts them to one
webhook endpoint.

Exports:
    NotificationChannel        -- Abstract base for channel implementations.
    DeliveryOutcome            -- Classified delivery result.
    Notifier                   -- Formats an event and delivers it, best effort.
    SlackNotificationChannel   -- Slack incoming webhook ({"text": ...}, expects "ok").
    WebhookNotificationChannel -- Generic JSON POST webhook.
    format_message             -- Render one event with its message template.
    build_notifier             -- Factory used by the application bootstrap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shootwatch.notifications.manager import DeliveryOutcome, NotificationChannel, Notifier
from shootwatch.notifications.messages import format_message
from shootwatch.notifications.slack import SlackNotificationChannel
from shootwatch.notifications.webhook import WebhookNotificationChannel

if TYPE_CHECKING:
    from shootwatch.models.config import NotificationConfig

_log = structlog.get_logger(component="notifications")

__all__ = [
    "DeliveryOutcome",
    "NotificationChannel",
    "Notifier",
    "SlackNotificationChannel",
    "WebhookNotificationChannel",
    "build_notifier",
    "format_message",
]


def build_notifier(config: NotificationConfig) -> Notifier:
    """Build a Notifier for the configured webhook URL and payload format.

    ``webhook_format`` selects the channel: ``slack`` (the default) or
    ``json`` for a generic endpoint.
    """
    channel: NotificationChannel
    if config.webhook_format == "json":
        channel = WebhookNotificationChannel(url=config.webhook_url, timeout=config.timeout_seconds)
    else:
        channel = SlackNotificationChannel(webhook_url=config.webhook_url, timeout=config.timeout_seconds)
    _log.info("notification_channel_enabled", channel=channel.channel_name)
    return Notifier(channel)
