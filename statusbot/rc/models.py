"""
Virtual RC (RC Together) API entities.

Only the entities and fields Status Bot reads or writes are modelled.
Unknown fields in responses are ignored.

Source: https://docs.rctogether.com/
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from statusbot.status import Status


class EntityType(str, Enum):
    """Kinds of entity that live on the Virtual RC grid."""
    AVATAR = "Avatar"
    BOT = "Bot"
    WALL = "Wall"
    NOTE = "Note"
    LINK = "Link"
    DESK = "Desk"
    ZOOM_LINK = "ZoomLink"
    UNKNOWN_AVATAR = "UnknownAvatar"
    AUDIO_ROOM = "AudioRoom"
    AUDIO_BLOCK = "AudioBlock"
    RC_CALENDAR = "RC::Calendar"


class Direction(str, Enum):
    """Where a bot can be facing."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class _Entity(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Position(_Entity):
    """Grid coordinates of an entity."""
    x: int
    y: int


class Avatar(_Entity):
    """The person who owns a desk."""
    id: int
    name: str
    image_url: str | None = None


class App(_Entity):
    id: int
    name: str


class Desk(_Entity):
    """A block owned by an avatar, where its owner can set a status."""
    id: int
    type: str = EntityType.DESK.value
    pos: Position
    color: str | None = None
    emoji: str | None = None
    status: str | None = None
    expires_at: datetime | None = None
    profile_url: str | None = None
    owner: Avatar | None = None

    def to_status(self) -> Status:
        """The status currently shown on this desk."""
        return Status(
            emoji=self.emoji or None,
            text=self.status or None,
            expires_at=self.expires_at,
        )


class BotMessage(_Entity):
    text: str
    sent_at: str
    mentioned_agent_ids: list[int] = Field(default_factory=list)


class BotEntity(_Entity):
    """An avatar controlled by an app. Status Bot is one of these."""
    id: int
    type: str = EntityType.BOT.value
    name: str
    display_name: str | None = None
    emoji: str | None = None
    direction: str | None = None
    can_be_mentioned: bool = False
    pos: Position
    app: App | None = None
    message: BotMessage | None = None


class UpdateBotRequest(_Entity):
    """
    Body of PATCH /api/bots/:id.

    Sent nested under a "bot" key. Unset fields are left out of the JSON.
    """
    name: str | None = None
    emoji: str | None = None
    x: int | None = None
    y: int | None = None
    direction: Direction | None = None
    can_be_mentioned: bool | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class DeskUpdate(_Entity):
    """
    Body of PATCH /api/desks/:id.

    Sent nested under a "desk" key. None is sent as an explicit null,
    which clears that field on the desk.
    """
    emoji: str | None = None
    status: str | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_status(cls, status: Status) -> "DeskUpdate":
        return cls(
            emoji=status.emoji,
            status=status.text,
            expires_at=status.expires_at,
        )

    @classmethod
    def cleared(cls) -> "DeskUpdate":
        return cls()

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
