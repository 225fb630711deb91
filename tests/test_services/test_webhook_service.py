"""Tests for WebhookService request handling."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import pytest

from caniuse_bot.api.app_state import AppState
from caniuse_bot.constants import INVALID_TOKEN_REPLY, MatchOutcome
from caniuse_bot.dataset.cache import FetchError
from caniuse_bot.messages.schemas import IncomingWebhookMessage
from caniuse_bot.services.webhook_service import strip_trigger_word
from tests.conftest import (
    TEST_TOKEN,
    RecordingTransport,
    dataset_transport,
    setup_test_state,
)


@pytest.fixture
def state(tmp_path: Path) -> AppState:
    return setup_test_state(tmp_path)


class TestStripTriggerWord:
    def test_removes_trigger_and_trims(self) -> None:
        assert strip_trigger_word("caniuse flexbox", "caniuse") == "flexbox"

    def test_lowercases(self) -> None:
        assert strip_trigger_word("caniuse FlexBox ", "caniuse") == "flexbox"

    def test_only_first_occurrence(self) -> None:
        assert strip_trigger_word("ci ci", "ci") == "ci"

    def test_trigger_alone_is_empty(self) -> None:
        assert strip_trigger_word("  caniuse  ", "caniuse") == ""

    def test_no_trigger_word(self) -> None:
        assert strip_trigger_word(" Fetch", "") == "fetch"


class TestTokenValidation:
    def test_matching_token(self, state: AppState) -> None:
        assert state.webhook_service.token_valid(TEST_TOKEN)

    def test_wrong_token(self, state: AppState) -> None:
        assert not state.webhook_service.token_valid("nope")

    def test_empty_token(self, state: AppState) -> None:
        assert not state.webhook_service.token_valid("")

    def test_unconfigured_token_rejects_everything(
        self, tmp_path: Path
    ) -> None:
        state = setup_test_state(tmp_path, outgoing_webhook_token="")
        assert not state.webhook_service.token_valid("")
        assert not state.webhook_service.token_valid("anything")


class TestHandle:
    async def test_invalid_token(self, state: AppState) -> None:
        result = await state.webhook_service.handle(
            "bad", "caniuse flexbox", "caniuse", "C1"
        )
        assert result.outcome is MatchOutcome.INVALID_TOKEN
        assert result.text == INVALID_TOKEN_REPLY
        assert result.reply is None
        assert result.message is None

    async def test_invalid_token_skips_dataset(self, tmp_path: Path) -> None:
        upstream = dataset_transport()
        state = setup_test_state(tmp_path, dataset=upstream)
        await state.webhook_service.handle("bad", "caniuse x", "caniuse", "")
        assert upstream.requests == []

    async def test_listing(self, state: AppState) -> None:
        result = await state.webhook_service.handle(
            TEST_TOKEN, "caniuse", "caniuse", "C1"
        )
        assert result.outcome is MatchOutcome.LISTING
        assert result.text == "css-grid, fetch, flex-wrap, flexbox"

    async def test_resolved_builds_message(self, tmp_path: Path) -> None:
        state = setup_test_state(
            tmp_path, bot_username="caniuse", bot_icon_emoji="globe"
        )
        result = await state.webhook_service.handle(
            TEST_TOKEN, "caniuse Fetch", "caniuse", "C123"
        )
        assert result.outcome is MatchOutcome.RESOLVED
        assert result.keyword == "fetch"
        assert result.reply is None
        assert result.text is None
        message = result.message
        assert message is not None
        assert message.channel == "C123"
        assert message.username == "caniuse"
        assert message.icon_emoji == ":globe:"
        assert [a.title for a in message.attachments] == ["Fetch"]

    async def test_resolved_without_channel(self, state: AppState) -> None:
        result = await state.webhook_service.handle(
            TEST_TOKEN, "caniuse fetch", "caniuse", ""
        )
        assert result.message is not None
        assert result.message.channel is None

    async def test_ambiguous(self, state: AppState) -> None:
        result = await state.webhook_service.handle(
            TEST_TOKEN, "caniuse flexbo", "caniuse", "C1"
        )
        assert result.outcome is MatchOutcome.AMBIGUOUS
        assert result.message is None
        assert result.reply is not None
        assert result.reply.text == (
            "Did you mean one of these? `flexbox`, `flex-wrap`"
        )
        assert result.reply.link_names == 1

    async def test_not_found(self, state: AppState) -> None:
        result = await state.webhook_service.handle(
            TEST_TOKEN, "caniuse zzzz", "caniuse", "C1"
        )
        assert result.outcome is MatchOutcome.NOT_FOUND
        assert result.keyword == "zzzz"
        assert result.reply is not None
        assert "`zzzz`" in result.reply.text

    async def test_fetch_failure_propagates(self, tmp_path: Path) -> None:
        state = setup_test_state(
            tmp_path, dataset=dataset_transport(status_code=503)
        )
        with pytest.raises(FetchError):
            await state.webhook_service.handle(
                TEST_TOKEN, "caniuse fetch", "caniuse", "C1"
            )


class TestDeliver:
    async def test_posts_message(self, tmp_path: Path) -> None:
        webhook = RecordingTransport(lambda request: httpx.Response(200))
        state = setup_test_state(tmp_path, webhook=webhook)

        await state.webhook_service.deliver(
            IncomingWebhookMessage(channel="C1"), "req1"
        )
        assert webhook.json_bodies() == [
            {"text": "", "channel": "C1", "attachments": []}
        ]

    async def test_failure_is_logged_not_raised(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        def _boom(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("sender exploded")

        state = setup_test_state(
            tmp_path, webhook=RecordingTransport(_boom)
        )
        with caplog.at_level(logging.ERROR):
            await state.webhook_service.deliver(
                IncomingWebhookMessage(), "req2"
            )
        assert "event=deliver_failed request_id=req2" in caplog.text
