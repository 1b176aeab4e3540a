"""
Exception hierarchy for Status Bot.

Soft misses (unknown emoji, bad timestamp, unknown user) are never
exceptions; they come back as None. Everything here is either a remote
failure that the bot turns into a reply, or a startup failure.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from statusbot.rc.models import Position


class StatusBotError(Exception):
    """Base class for all Status Bot errors."""


class ConfigError(StatusBotError):
    """Required configuration is missing or invalid."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required configuration: {', '.join(missing)}")


class RecurseError(StatusBotError):
    """A call to the Virtual RC API failed."""


class DirectoryFetchError(RecurseError):
    """The desk directory could not be fetched or decoded."""


class ZulipError(StatusBotError):
    """A call to the Zulip API failed."""


class NoOpenPositionError(StatusBotError):
    """Every grid position around a desk was rejected for the bot avatar."""

    def __init__(self, desk_id: int, pos: "Position"):
        self.desk_id = desk_id
        self.pos = pos
        super().__init__(
            f"Unable to find an open grid position next to desk "
            f"(id = {desk_id}, pos = ({pos.x}, {pos.y}))"
        )
