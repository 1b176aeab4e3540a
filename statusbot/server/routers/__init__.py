"""
FastAPI routers for Status Bot.

Provides:
- system: Heartbeat and health
- webhook: Zulip outgoing webhook
"""

from statusbot.server.routers.system import router as system_router
from statusbot.server.routers.webhook import router as webhook_router

__all__ = [
    "system_router",
    "webhook_router",
]
