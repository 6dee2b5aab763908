"""Notification channel contract and the change-event notifier.

NotificationChannel -- ABC every transport must implement.
DeliveryOutcome     -- Classified result of one delivery attempt.
Notifier            -- Formats a ChangeEvent and hands it to a channel.
                       Best effort: a failed delivery is logged, counted
                       and reported to the caller, never retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum

import structlog

from shootwatch.models.changes import ChangeEvent
from shootwatch.notifications.messages import format_message
from shootwatch.observability.metrics import notifications_total

_log = structlog.get_logger(component="notifications.manager")


class DeliveryOutcome(StrEnum):
    """Result of a single delivery attempt."""

    DELIVERED = "delivered"
    REJECTED = "rejected"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"

    @property
    def ok(self) -> bool:
        return self is DeliveryOutcome.DELIVERED


class NotificationChannel(ABC):
    """Abstract base class for all notification channels.

    Every concrete channel must implement ``send``, which must not raise:
    failures are classified and returned as a DeliveryOutcome.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Human-readable channel identifier used in metrics and logs."""

    @abstractmethod
    async def send(self, message: str, event: ChangeEvent | None = None) -> DeliveryOutcome:
        """Deliver *message* via this channel.

        *event* is the change the message describes, for channels that
        attach structured data alongside the text.
        """


class Notifier:
    """Formats change events and delivers them through one channel."""

    def __init__(self, channel: NotificationChannel) -> None:
        self._channel = channel

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    async def notify(self, event: ChangeEvent) -> DeliveryOutcome:
        """Format *event* and send it. Never raises for delivery problems."""
        message = format_message(event)
        try:
            outcome = await self._channel.send(message, event)
        except Exception as exc:  # noqa: BLE001
            _log.error(
                "notification_channel_unexpected_error",
                channel=self._channel.channel_name,
                kind=event.kind.value,
                error=str(exc),
            )
            outcome = DeliveryOutcome.TRANSPORT_ERROR

        label = "true" if outcome.ok else "false"
        notifications_total.labels(channel=self._channel.channel_name, success=label).inc()

        if outcome.ok:
            _log.info("notification_sent", channel=self._channel.channel_name, kind=event.kind.value)
        else:
            _log.warning(
                "notification_failed",
                channel=self._channel.channel_name,
                kind=event.kind.value,
                outcome=outcome.value,
                message=message,
            )
        return outcome
