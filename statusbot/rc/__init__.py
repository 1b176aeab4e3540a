"""
Virtual RC integration.

Provides:
- API entities (desks, bots, positions)
- Async HTTP client
- Grid placement for the bot avatar
"""

from statusbot.rc.models import (
    Avatar,
    BotEntity,
    Desk,
    DeskUpdate,
    Direction,
    Position,
    UpdateBotRequest,
)
from statusbot.rc.client import RecurseClient
from statusbot.rc.placement import clamp_position, surrounding_positions

__all__ = [
    "Avatar",
    "BotEntity",
    "Desk",
    "DeskUpdate",
    "Direction",
    "Position",
    "UpdateBotRequest",
    "RecurseClient",
    "clamp_position",
    "surrounding_positions",
]
