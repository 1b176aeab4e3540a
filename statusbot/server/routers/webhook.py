"""
Zulip outgoing webhook route.

Zulip POSTs here for every direct message (and mention) the bot
receives; the reply goes back in the response body.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from statusbot.server.dependencies import BotDep
from statusbot.zulip.models import OutgoingWebhook

router = APIRouter()


@router.post("/status")
async def receive_webhook(webhook: OutgoingWebhook, bot: BotDep):
    """
    Handle a Zulip outgoing webhook.

    Always answers 200; failures are reported to the sender as reply text.
    """
    reply = await bot.respond(webhook)
    return JSONResponse(reply.to_json())
