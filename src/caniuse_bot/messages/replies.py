"""Plain-text replies for outcomes that do not produce an attachment."""

from collections.abc import Sequence

from caniuse_bot.config import Settings
from caniuse_bot.messages.schemas import WebhookReply


def ambiguous_text(keys: Sequence[str]) -> str:
    candidates = ", ".join(f"`{key}`" for key in keys)
    return f"Did you mean one of these? {candidates}"


def not_found_text(keyword: str) -> str:
    return (
        f"Sorry, I couldn't find a feature matching `{keyword}`. "
        "Send the trigger word on its own for the full list."
    )


def build_reply(text: str, settings: Settings) -> WebhookReply:
    """Wrap text in the platform's reply envelope with the bot identity."""
    return WebhookReply(
        text=text,
        username=settings.bot_username or None,
        icon_emoji=settings.bot_icon_emoji or None,
    )
