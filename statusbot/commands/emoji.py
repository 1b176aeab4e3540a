"""
Zulip emoji shortcodes <-> Unicode graphemes.

Zulip names its emoji differently from the common (GitHub/Slack style)
shortcodes, e.g. Zulip's :bento: is :bento_box: elsewhere. A JSON table
maps each Zulip name to one or more standard aliases (comma separated,
tried in order); the `emoji` library turns a standard alias into the
grapheme Virtual RC expects.

Custom Zulip emoji (:sadparrot:) have no grapheme and resolve to None.
"""

import json
from functools import lru_cache
from pathlib import Path

import emoji
from loguru import logger

DEFAULT_TABLE_PATH = Path(__file__).parent.parent / "data" / "zulip_emoji.json"

VARIATION_SELECTOR = "\ufe0f"


@lru_cache(maxsize=2048)
def standard_to_grapheme(name: str) -> str | None:
    """Resolve a standard alias such as 'red_apple' or 'apple' to its grapheme."""
    name = name.strip().strip(":")
    if not name:
        return None
    shortcode = f":{name}:"
    grapheme = emoji.emojize(shortcode, language="alias")
    if grapheme == shortcode or not emoji.is_emoji(grapheme):
        return None
    return grapheme


def is_grapheme(value: str) -> bool:
    """True if `value` is exactly one Unicode emoji, e.g. "🦀" but not "🦀🦀" or "crab"."""
    return emoji.is_emoji(value)


def _key(grapheme: str) -> str:
    return grapheme.replace(VARIATION_SELECTOR, "")


class EmojiAliases:
    """
    Lookup table between Zulip emoji names and Unicode graphemes.

    The forward direction is used when parsing `status :crab: ...`, the
    reverse direction when showing a desk status back to the user.
    """

    def __init__(self, table: dict[str, str]):
        """
        Args:
            table: Zulip emoji name -> comma separated standard aliases.
        """
        self._table = dict(table)
        self._reverse: dict[str, str] | None = None

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "EmojiAliases":
        """Load the alias table from JSON (defaults to the bundled table)."""
        path = Path(path) if path else DEFAULT_TABLE_PATH
        table = json.loads(path.read_text(encoding="utf-8"))
        logger.debug(f"Loaded {len(table)} emoji aliases from {path}")
        return cls(table)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, chat_alias: str) -> bool:
        return chat_alias in self._table

    def to_grapheme(self, chat_alias: str) -> str | None:
        """
        Resolve a Zulip emoji name to a grapheme.

        Returns:
            The grapheme of the first candidate that resolves, or None if
            the name is unknown or none of its candidates resolve.
        """
        candidates = self._table.get(chat_alias.strip())
        if not candidates:
            return None
        for candidate in candidates.split(","):
            grapheme = standard_to_grapheme(candidate)
            if grapheme:
                return grapheme
        logger.debug(f"No grapheme for Zulip emoji :{chat_alias}: (candidates: {candidates})")
        return None

    def to_alias(self, grapheme: str) -> str | None:
        """Find the Zulip emoji name for a grapheme, if there is one."""
        if not grapheme:
            return None
        if self._reverse is None:
            self._reverse = self._build_reverse()
        return self._reverse.get(_key(grapheme))

    def _build_reverse(self) -> dict[str, str]:
        reverse: dict[str, str] = {}
        for chat_alias in self._table:
            grapheme = self.to_grapheme(chat_alias)
            if grapheme:
                reverse.setdefault(_key(grapheme), chat_alias)
        return reverse
