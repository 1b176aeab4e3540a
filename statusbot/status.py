"""
The Status value shared by the parser, the executor and the RC client.

A status is what appears on a desk in Virtual RC: an emoji, a line of
text and an expiration time. Any of the three may be absent.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

DEFAULT_EXPIRATION = timedelta(minutes=30)


def format_time(value: datetime) -> str:
    """Format a timestamp as a Zulip global time, e.g. <time:2025-01-01T10:00:00-04:00>."""
    return f"<time:{value.isoformat()}>"


@dataclass(frozen=True)
class Status:
    """
    A desk status.

    Supported command forms:
        status Working on my project
        status :crab: Learning Rust today
        status :bento: Lunch train! <time:2023-09-29T12:00:00-06:00>
    """
    emoji: str | None = None  # Unicode grapheme, never a :shortcode:
    text: str | None = None  # Never contains '<' or '>'
    expires_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.emoji and not self.text and self.expires_at is None

    def with_default_expiration(self, now: datetime | None = None) -> "Status":
        """
        Fill in the 30 minute default expiration for a status with text.

        Virtual RC requires an expiration whenever a text status is set.
        """
        if not self.text or self.expires_at is not None:
            return self
        now = now or datetime.now(timezone.utc)
        return Status(
            emoji=self.emoji,
            text=self.text,
            expires_at=now + DEFAULT_EXPIRATION,
        )

    def render(self, emoji_alias: str | None = None) -> str:
        """
        Render the status as a single line of Zulip markdown.

        Args:
            emoji_alias: Chat shortcode to show instead of the raw grapheme.

        Returns:
            Present segments joined by a single space.
        """
        segments = []
        if emoji_alias:
            segments.append(f":{emoji_alias}:")
        elif self.emoji:
            segments.append(self.emoji)
        if self.text:
            segments.append(self.text)
        if self.expires_at is not None:
            segments.append(format_time(self.expires_at))
        return " ".join(segments)

    def __str__(self) -> str:
        return self.render()
