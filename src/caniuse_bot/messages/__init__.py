"""Chat-platform payloads: attachments and text replies."""

from caniuse_bot.messages.attachment import AttachmentBuilder
from caniuse_bot.messages.schemas import (
    Attachment,
    AttachmentField,
    IncomingWebhookMessage,
    WebhookReply,
)

__all__ = [
    "Attachment",
    "AttachmentBuilder",
    "AttachmentField",
    "IncomingWebhookMessage",
    "WebhookReply",
]
