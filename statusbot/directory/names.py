"""
Zulip display name normalization.

Zulip names at RC carry optional pronoun and batch suffixes that Virtual
RC names do not:

    Jacob Young (he/him) (S2'16)  ->  Jacob Young

Any other parenthetical (a nickname, say) is part of the name and kept.
"""

import re

# (he), (they/them), (she/her/hers)
PRONOUNS = r"\([a-z/]+\)"
# (W1'23), (SP2'16), (Sp'19), (S2'16), (F'21), (m1'24)
BATCH = r"\((?:W|SP|Sp|S|F|m)\d?['’]\d{2}\)"

_NAME_PATTERN = re.compile(
    rf"^(?P<name>.*?)(?:\s*(?:{PRONOUNS}|{BATCH}))*\s*$",
    re.DOTALL,
)


def normalize_username(name: str) -> str:
    """
    Strip trailing pronoun and batch parentheticals from a Zulip name.

    Only a trailing run of recognized parentheticals is removed, in any
    order, so normalizing twice gives the same result as normalizing once.
    """
    match = _NAME_PATTERN.match(name)
    return match.group("name").strip()
