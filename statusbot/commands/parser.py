"""
Command parsing for Status Bot.

Turns the text of a Zulip direct message into exactly one Command.
Parsing never fails: anything unrecognized becomes Help.

Supported commands:
    status {emoji}? {text}? {expiration}?
    show
    clear
    feedback {text}
    set_name {name}
    clear_name
    help
"""

import re
from dataclasses import dataclass
from datetime import datetime

from statusbot.commands.emoji import EmojiAliases, is_grapheme
from statusbot.status import Status


@dataclass(frozen=True)
class Help:
    """Print the help message."""


@dataclass(frozen=True)
class Show:
    """Display the sender's current status."""


@dataclass(frozen=True)
class Clear:
    """Clear the sender's status."""


@dataclass(frozen=True)
class SetStatus:
    """Set the sender's status."""
    status: Status


@dataclass(frozen=True)
class Feedback:
    """Forward feedback to the maintainers."""
    text: str


@dataclass(frozen=True)
class SetName:
    """Tell the bot the sender's Virtual RC name."""
    name: str


@dataclass(frozen=True)
class ClearName:
    """Forget the sender's Virtual RC name correction."""


@dataclass(frozen=True)
class TestMissingDesk:
    """Diagnostic: print the missing desk message."""
    __test__ = False  # keep pytest from collecting it


@dataclass(frozen=True)
class TestLookupDesk:
    """Diagnostic: look a Virtual RC name up in the desk directory."""
    __test__ = False  # keep pytest from collecting it
    name: str


@dataclass(frozen=True)
class TestSendHome:
    """Diagnostic: send the bot avatar to its home position."""
    __test__ = False  # keep pytest from collecting it


Command = (
    Help
    | Show
    | Clear
    | SetStatus
    | Feedback
    | SetName
    | ClearName
    | TestMissingDesk
    | TestLookupDesk
    | TestSendHome
)

KEYWORDS = (
    "help",
    "show",
    "clear",
    "feedback",
    "status",
    "set_name",
    "clear_name",
    "test_missing_desk",
    "test_lookup_desk",
    "test_send_home",
)

# Status sub-matchers, applied in order, each optional:
#   :emoji: (or a raw emoji)   free text   <time:ISO8601>
_EMOJI_PATTERN = re.compile(r":(?P<emoji>[^\n]+?):")
_TEXT_PATTERN = re.compile(r"[^<>\r\n\t]+")
_TIME_PATTERN = re.compile(r"<time:(?P<iso8601>[^>\n]*)>")
_WHITESPACE = re.compile(r"\s*")
_WORD_PATTERN = re.compile(r"\S+")


# Global alias table, loaded on first use
_aliases: EmojiAliases | None = None


def get_emoji_aliases() -> EmojiAliases:
    """Get the bundled Zulip emoji alias table."""
    global _aliases
    if _aliases is None:
        _aliases = EmojiAliases.from_file()
    return _aliases


def set_emoji_aliases(aliases: EmojiAliases) -> None:
    """Replace the alias table used when none is passed explicitly."""
    global _aliases
    _aliases = aliases


def parse_time(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp with a UTC offset; anything else is None."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def parse_status(text: str, aliases: EmojiAliases | None = None) -> Status:
    """
    Parse the argument of a `status` command.

    The three parts are optional but must appear in this order:
        :crab: Rewriting Status Bot in Rust <time:2025-01-01T10:00:00-04:00>

    The emoji is either a colon-delimited Zulip name or a single Unicode
    emoji as the first word (`status 🦀 busy`). A bare word is never an
    emoji, so `status apple` sets the text "apple". Unknown emoji and
    unparseable times are dropped rather than rejecting the whole command.

    Args:
        text: Everything after the `status` keyword.
        aliases: Zulip emoji table (defaults to the bundled one).

    Returns:
        The parsed Status (possibly empty).
    """
    if aliases is None:
        aliases = get_emoji_aliases()
    pos = _WHITESPACE.match(text).end()

    emoji = None
    match = _EMOJI_PATTERN.match(text, pos)
    if match:
        emoji = aliases.to_grapheme(match.group("emoji"))
        pos = _WHITESPACE.match(text, match.end()).end()
    else:
        match = _WORD_PATTERN.match(text, pos)
        if match and is_grapheme(match.group(0)):
            emoji = match.group(0)
            pos = _WHITESPACE.match(text, match.end()).end()

    status_text = None
    match = _TEXT_PATTERN.match(text, pos)
    if match:
        status_text = match.group(0).strip() or None
        pos = _WHITESPACE.match(text, match.end()).end()

    expires_at = None
    match = _TIME_PATTERN.match(text, pos)
    if match:
        expires_at = parse_time(match.group("iso8601"))

    return Status(emoji=emoji, text=status_text, expires_at=expires_at)


def parse_command(message: str, aliases: EmojiAliases | None = None) -> Command:
    """
    Parse a direct message into a Command.

    The first word picks the command (case-sensitive); the rest are its
    arguments. Empty messages and unknown commands yield Help.

    Examples:
        "show" -> Show()
        "feedback This thing is great!" -> Feedback("This thing is great!")
        "status :pear: Open to pairing" -> SetStatus(Status(emoji="🍐", text="Open to pairing"))
        "hello" -> Help()
    """
    # str.split() with no argument splits on any Unicode whitespace
    parts = message.split()
    if not parts:
        return Help()

    keyword, args = parts[0], parts[1:]
    rest = " ".join(args).strip()

    match keyword:
        case "help":
            return Help()
        case "show":
            return Show()
        case "clear":
            return Clear()
        case "clear_name":
            return ClearName()
        case "feedback":
            return Feedback(rest) if rest else Help()
        case "set_name":
            return SetName(rest)
        case "status":
            return SetStatus(parse_status(rest, aliases)) if rest else Help()
        case "test_missing_desk":
            return TestMissingDesk()
        case "test_lookup_desk":
            return TestLookupDesk(rest)
        case "test_send_home":
            return TestSendHome()
        case _:
            return Help()
