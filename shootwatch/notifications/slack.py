"""Slack incoming-webhook notification channel.

Slack acknowledges an accepted message with a 200 response whose body is
the literal text ``ok``; anything else is a rejection.
"""

from __future__ import annotations

import httpx

from shootwatch.models.changes import ChangeEvent
from shootwatch.notifications.webhook import WebhookNotificationChannel


class SlackNotificationChannel(WebhookNotificationChannel):
    """Posts ``{"text": message}`` to a Slack incoming webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("Slack webhook_url must not be empty")
        super().__init__(url=webhook_url, timeout=timeout, transport=transport)

    @property
    def channel_name(self) -> str:
        return "slack"

    def _build_payload(self, message: str, event: ChangeEvent | None) -> dict[str, object]:
        return {"text": message}

    def _is_accepted(self, response: httpx.Response) -> bool:
        return response.is_success and response.text.strip() == "ok"
