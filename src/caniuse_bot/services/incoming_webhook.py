"""Outbound sender for the chat platform's incoming webhook."""

from __future__ import annotations

import logging

import httpx

from caniuse_bot.config import Settings
from caniuse_bot.messages.schemas import IncomingWebhookMessage
from caniuse_bot.resilience.errors import classify_error

logger = logging.getLogger(__name__)


class IncomingWebhookClient:
    """Posts rich messages; failures are logged, never raised."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = settings.incoming_webhook_url
        self._timeout = settings.http_timeout_seconds
        self._transport = transport

    async def post(self, message: IncomingWebhookMessage) -> bool:
        """Send message; return True if the platform accepted it."""
        if not self._url:
            logger.warning(
                "event=incoming_webhook_unconfigured action=drop_message"
            )
            return False
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._url,
                    json=message.model_dump(exclude_none=True),
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "event=incoming_webhook_failed error_class=%s error=%s",
                classify_error(exc).value,
                exc,
            )
            return False
        return True
