"""Outgoing-webhook request handling.

Turns one inbound request into either a direct reply (plain text or a
JSON envelope) or a rich message to deliver through the incoming
webhook. Exceptions propagate; the route is the catch-all boundary.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import assert_never

from caniuse_bot.config import Settings
from caniuse_bot.constants import INVALID_TOKEN_REPLY, MatchOutcome
from caniuse_bot.dataset.cache import DatasetCache
from caniuse_bot.matching.resolver import (
    Ambiguous,
    FeatureResolver,
    NotFound,
    Resolved,
)
from caniuse_bot.messages.attachment import AttachmentBuilder
from caniuse_bot.messages.replies import (
    ambiguous_text,
    build_reply,
    not_found_text,
)
from caniuse_bot.messages.schemas import (
    IncomingWebhookMessage,
    WebhookReply,
)
from caniuse_bot.services.incoming_webhook import IncomingWebhookClient

logger = logging.getLogger(__name__)


@dataclass
class WebhookResult:
    """What the route should answer, and what to send out of band."""

    outcome: MatchOutcome
    keyword: str = ""
    text: str | None = None
    reply: WebhookReply | None = None
    message: IncomingWebhookMessage | None = None


def strip_trigger_word(text: str, trigger_word: str) -> str:
    """Remove the first trigger-word occurrence, trim and lowercase."""
    if trigger_word:
        text = text.replace(trigger_word, "", 1)
    return text.strip().lower()


class WebhookService:
    def __init__(
        self,
        settings: Settings,
        dataset_cache: DatasetCache,
        resolver: FeatureResolver,
        builder: AttachmentBuilder,
        sender: IncomingWebhookClient,
    ) -> None:
        self._settings = settings
        self._dataset_cache = dataset_cache
        self._resolver = resolver
        self._builder = builder
        self._sender = sender

    def token_valid(self, token: str) -> bool:
        expected = self._settings.outgoing_webhook_token
        return bool(expected) and hmac.compare_digest(
            token.encode("utf-8"), expected.encode("utf-8")
        )

    async def handle(
        self,
        token: str,
        text: str,
        trigger_word: str,
        channel_id: str,
    ) -> WebhookResult:
        if not self.token_valid(token):
            logger.warning("event=invalid_token channel=%s", channel_id)
            return WebhookResult(
                outcome=MatchOutcome.INVALID_TOKEN,
                text=INVALID_TOKEN_REPLY,
            )

        keyword = strip_trigger_word(text, trigger_word)
        if not keyword:
            listing = await self._dataset_cache.feature_listing()
            return WebhookResult(outcome=MatchOutcome.LISTING, text=listing)

        result = await self._resolver.resolve(keyword)
        match result:
            case Resolved(key=key, feature=feature):
                attachment = await self._builder.build(key, feature)
                message = IncomingWebhookMessage(
                    channel=channel_id or None,
                    username=self._settings.bot_username or None,
                    icon_emoji=self._settings.bot_icon_emoji or None,
                    attachments=[attachment],
                )
                return WebhookResult(
                    outcome=MatchOutcome.RESOLVED,
                    keyword=keyword,
                    message=message,
                )
            case Ambiguous(keys=keys):
                return WebhookResult(
                    outcome=MatchOutcome.AMBIGUOUS,
                    keyword=keyword,
                    reply=build_reply(ambiguous_text(keys), self._settings),
                )
            case NotFound():
                return WebhookResult(
                    outcome=MatchOutcome.NOT_FOUND,
                    keyword=keyword,
                    reply=build_reply(
                        not_found_text(keyword), self._settings
                    ),
                )
            case _:
                assert_never(result)

    async def deliver(
        self, message: IncomingWebhookMessage, request_id: str
    ) -> None:
        """Fire-and-forget send; every failure ends in a log line."""
        try:
            sent = await self._sender.post(message)
        except Exception:
            logger.exception(
                "event=deliver_failed request_id=%s", request_id
            )
            return
        logger.info(
            "event=message_delivered request_id=%s sent=%s",
            request_id,
            sent,
        )
