"""
FastAPI dependency injection utilities.

Provides dependencies for:
- Bot runtime access
- Bot access
"""

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

if TYPE_CHECKING:
    from statusbot.bot.bot import StatusBot
    from statusbot.server.runtime import BotRuntime


def get_runtime(request: Request) -> "BotRuntime":
    """Get bot runtime from app state."""
    return request.app.state.runtime


def get_bot(request: Request) -> "StatusBot":
    """Get the bot from the runtime."""
    return request.app.state.runtime.bot


# Type aliases for dependency injection
RuntimeDep = Annotated["BotRuntime", Depends(get_runtime)]
BotDep = Annotated["StatusBot", Depends(get_bot)]
