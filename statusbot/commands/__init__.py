"""
Command parsing for Status Bot.

Provides:
- Command variants (one dataclass per command)
- Message and status parsing
- Zulip emoji alias resolution
"""

from statusbot.commands.emoji import EmojiAliases
from statusbot.commands.parser import (
    Clear,
    ClearName,
    Command,
    Feedback,
    Help,
    SetName,
    SetStatus,
    Show,
    TestLookupDesk,
    TestMissingDesk,
    TestSendHome,
    get_emoji_aliases,
    parse_command,
    parse_status,
)

__all__ = [
    "EmojiAliases",
    "Clear",
    "ClearName",
    "Command",
    "Feedback",
    "Help",
    "SetName",
    "SetStatus",
    "Show",
    "TestLookupDesk",
    "TestMissingDesk",
    "TestSendHome",
    "get_emoji_aliases",
    "parse_command",
    "parse_status",
]
