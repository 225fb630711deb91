"""Rich-message payloads sent to the chat platform."""

from pydantic import BaseModel, Field

from caniuse_bot.constants import MRKDWN_IN


class AttachmentField(BaseModel):
    """One titled block inside an attachment."""

    title: str
    value: str


class Attachment(BaseModel):
    """Formatted card for a single resolved feature."""

    color: str
    title: str
    title_link: str
    text: str
    fallback: str
    mrkdwn_in: list[str] = Field(default_factory=lambda: list(MRKDWN_IN))
    fields: list[AttachmentField] = Field(default_factory=list)


class IncomingWebhookMessage(BaseModel):
    """Body POSTed to the platform's incoming-webhook URL."""

    text: str = ""
    channel: str | None = None
    username: str | None = None
    icon_emoji: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)


class WebhookReply(BaseModel):
    """Synchronous JSON reply to an outgoing-webhook request."""

    text: str
    link_names: int = 1
    username: str | None = None
    icon_emoji: str | None = None
