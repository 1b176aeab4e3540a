"""
Zulip integration.

Provides:
- Outgoing webhook payload models
- Reply types returned to Zulip
- REST client for sending direct messages
"""

from statusbot.zulip.models import (
    ContentReply,
    NoReply,
    OutgoingWebhook,
    Reply,
    Trigger,
    WebhookMessage,
)
from statusbot.zulip.client import ZulipClient

__all__ = [
    "ContentReply",
    "NoReply",
    "OutgoingWebhook",
    "Reply",
    "Trigger",
    "WebhookMessage",
    "ZulipClient",
]
