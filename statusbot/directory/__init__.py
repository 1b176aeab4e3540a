"""
Identity resolution between Zulip and Virtual RC.

Provides:
- Zulip display name normalization
- Desk directory with user name corrections
- Periodic background refresh
"""

from statusbot.directory.names import normalize_username
from statusbot.directory.store import DeskLocation, IdentityDirectory
from statusbot.directory.refresher import DirectoryRefresher

__all__ = [
    "normalize_username",
    "DeskLocation",
    "IdentityDirectory",
    "DirectoryRefresher",
]
