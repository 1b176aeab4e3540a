"""
Pytest configuration and shared fixtures for Status Bot tests.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from statusbot.commands.emoji import EmojiAliases
from statusbot.directory.store import IdentityDirectory
from statusbot.rc.models import Avatar, BotEntity, Desk, Position


@pytest.fixture
def aliases():
    """A small Zulip emoji table."""
    return EmojiAliases({
        "apple": "apple,red_apple",
        "bento": "bento,bento_box",
        "crab": "crab",
        "pear": "pear",
        "sadparrot": "",
    })


def make_desk(desk_id: int, owner: str | None, x: int = 10, y: int = 20, **fields) -> Desk:
    """Build a desk the way Virtual RC would return it."""
    return Desk(
        id=desk_id,
        pos=Position(x=x, y=y),
        owner=Avatar(id=desk_id * 100, name=owner) if owner else None,
        **fields,
    )


def make_bot_entity(x: int = 0, y: int = 0) -> BotEntity:
    return BotEntity(id=42, name="Status Bot", pos=Position(x=x, y=y))


@pytest.fixture
def desks():
    """Desks for two people plus an unclaimed one."""
    return [
        make_desk(1, "Ada Lovelace", x=10, y=20),
        make_desk(2, "Jacob Young", x=30, y=40),
        make_desk(3, None, x=50, y=60),
    ]


@pytest.fixture
def rc(desks):
    """A Virtual RC client whose calls all succeed."""
    client = AsyncMock()
    client.get_desks = AsyncMock(return_value=desks)
    client.move_bot = AsyncMock(return_value=make_bot_entity())
    return client


@pytest_asyncio.fixture
async def directory(rc):
    """A directory populated from the mock client."""
    directory = IdentityDirectory(rc, lock_timeout=0.05)
    await directory.refresh()
    return directory
