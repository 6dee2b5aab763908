"""Generic JSON webhook notification channel.

Posts each message as ``{"text": ..., "kind": ...}`` to a configured HTTP
endpoint. Any 2xx response counts as delivered.
"""

from __future__ import annotations

import httpx
import structlog

from shootwatch.models.changes import ChangeEvent
from shootwatch.notifications.manager import DeliveryOutcome, NotificationChannel

_log = structlog.get_logger(component="notifications.webhook")


class WebhookNotificationChannel(NotificationChannel):
    """Delivers messages by POSTing a JSON payload to a configurable URL.

    Args:
        url:       Full endpoint URL.
        headers:   Optional extra headers.
        timeout:   HTTP request timeout in seconds. Defaults to 10.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("Webhook url must not be empty")
        self._url = url
        self._headers = headers or {}
        self._timeout = timeout
        self._transport = transport

    @property
    def channel_name(self) -> str:
        return "webhook"

    async def send(self, message: str, event: ChangeEvent | None = None) -> DeliveryOutcome:
        """POST *message* to the configured endpoint."""
        payload = self._build_payload(message, event)
        request_headers = {
            "Content-Type": "application/json",
            **self._headers,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    json=payload,
                    headers=request_headers,
                )
        except httpx.TimeoutException:
            _log.warning("webhook_request_timeout", channel=self.channel_name, url=self._url)
            return DeliveryOutcome.TIMEOUT
        except httpx.HTTPError as exc:
            _log.warning("webhook_http_error", channel=self.channel_name, error=str(exc))
            return DeliveryOutcome.TRANSPORT_ERROR

        if self._is_accepted(response):
            return DeliveryOutcome.DELIVERED
        _log.warning(
            "webhook_rejected",
            channel=self.channel_name,
            status_code=response.status_code,
            body=response.text[:200],
        )
        return DeliveryOutcome.REJECTED

    def _build_payload(self, message: str, event: ChangeEvent | None) -> dict[str, object]:
        payload: dict[str, object] = {"text": message}
        if event is not None:
            payload["kind"] = event.kind.value
        return payload

    def _is_accepted(self, response: httpx.Response) -> bool:
        return response.is_success
