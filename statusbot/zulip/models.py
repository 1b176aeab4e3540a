"""
Zulip outgoing webhook payloads and bot replies.

Zulip POSTs an outgoing webhook to the bot whenever it is mentioned or
sent a direct message, and expects the reply in the HTTP response body.

Source: https://zulip.com/api/outgoing-webhooks
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Trigger(str, Enum):
    """What about the message caused Zulip to call the webhook."""
    DIRECT_MESSAGE = "direct_message"
    PRIVATE_MESSAGE = "private_message"  # Renamed to direct_message in Zulip 8.0
    MENTION = "mention"

    @property
    def is_direct(self) -> bool:
        return self in (Trigger.DIRECT_MESSAGE, Trigger.PRIVATE_MESSAGE)


class WebhookMessage(BaseModel):
    """The message that triggered the webhook, in the format used by GET /messages."""
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    sender_id: int
    sender_full_name: str
    sender_email: str = ""
    content: str = ""
    type: str = ""
    avatar_url: str | None = None
    client: str = ""


class OutgoingWebhook(BaseModel):
    """Body of an outgoing webhook request from Zulip."""
    model_config = ConfigDict(extra="ignore")

    bot_email: str
    bot_full_name: str
    data: str  # Raw markdown of the message
    trigger: Trigger
    token: str  # Fixed per-bot token, compared against the configured one
    message: WebhookMessage


class Reply:
    """
    The bot's response to an outgoing webhook.

    Zulip accepts either {"response_not_required": true} or
    {"content": "..."}; only the populated field is ever sent.
    """

    def to_json(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class NoReply(Reply):
    """Tell Zulip not to post anything."""

    def to_json(self) -> dict[str, Any]:
        return {"response_not_required": True}


@dataclass(frozen=True)
class ContentReply(Reply):
    """Post `content` (Zulip markdown) back to the sender."""
    content: str

    def to_json(self) -> dict[str, Any]:
        return {"content": self.content}
