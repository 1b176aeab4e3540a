"""
Identity directory: Zulip user -> Virtual RC desk.

Provides:
- Owner name -> desk table, rebuilt wholesale from Virtual RC
- Name corrections set by users with `set_name`
- Lock-guarded access; readers never see a half-built table
"""

import asyncio
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, NamedTuple, Protocol

from loguru import logger

from statusbot.directory.names import normalize_username
from statusbot.errors import DirectoryFetchError, RecurseError
from statusbot.rc.models import Desk, Position

DEFAULT_LOCK_TIMEOUT = 0.5


class DeskLocation(NamedTuple):
    """Where a person's desk is."""
    desk_id: int
    pos: Position


class DeskSource(Protocol):
    """Anything that can list every desk (the Virtual RC client)."""

    async def get_desks(self) -> list[Desk]: ...


class IdentityDirectory:
    """
    Resolves Zulip display names to Virtual RC desks.

    The desk table starts empty and is replaced as a whole by refresh().
    The correction table lives independently: it is only changed one
    entry at a time by set_correction/clear_correction and is never
    rebuilt.
    """

    def __init__(
        self,
        source: DeskSource,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        """
        Args:
            source: Where desks are fetched from.
            lock_timeout: How long a reader waits for a lock before giving up.
        """
        self.source = source
        self.lock_timeout = lock_timeout

        self._desks: Mapping[str, DeskLocation] = MappingProxyType({})
        self._desks_lock = asyncio.Lock()
        self._refreshed_at: datetime | None = None

        self._corrections: dict[str, str] = {}
        self._corrections_lock = asyncio.Lock()

    @property
    def size(self) -> int:
        return len(self._desks)

    @property
    def is_populated(self) -> bool:
        return self._refreshed_at is not None

    @property
    def last_refreshed_at(self) -> datetime | None:
        return self._refreshed_at

    # ------------------------------------------------------------------
    # Desk table
    # ------------------------------------------------------------------

    async def refresh(self) -> int:
        """
        Rebuild the desk table from Virtual RC.

        Desks without an owner are skipped. On failure the previous table
        stays in place.

        Returns:
            Number of desks in the new table.

        Raises:
            DirectoryFetchError: If the desks could not be fetched.
        """
        try:
            desks = await self.source.get_desks()
        except RecurseError as e:
            raise DirectoryFetchError(f"Failed to fetch desks: {e}") from e

        table: dict[str, DeskLocation] = {}
        for desk in desks:
            if desk.owner is None:
                continue
            table[desk.owner.name] = DeskLocation(desk.id, desk.pos)

        async with self._desks_lock:
            self._desks = MappingProxyType(table)
            self._refreshed_at = datetime.now()

        logger.debug(f"Desk directory refreshed: {len(table)} owned desks")
        return len(table)

    async def _acquire(self, lock: asyncio.Lock) -> bool:
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.lock_timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def _snapshot(self) -> Mapping[str, DeskLocation] | None:
        if not await self._acquire(self._desks_lock):
            logger.warning("Desk directory is busy, treating lookup as a miss")
            return None
        try:
            return self._desks
        finally:
            self._desks_lock.release()

    async def entries(self) -> dict[str, DeskLocation]:
        """Copy of the current owner name -> desk table."""
        desks = await self._snapshot()
        return dict(desks) if desks is not None else {}

    async def lookup_name(self, rc_name: str) -> DeskLocation | None:
        """Look up a Virtual RC owner name directly."""
        desks = await self._snapshot()
        if desks is None:
            return None
        return desks.get(rc_name)

    async def lookup(self, zulip_name: str) -> DeskLocation | None:
        """
        Find the desk belonging to a Zulip user.

        A correction set for the user (under any pronoun/batch variant of
        their name) takes precedence over their Zulip name.

        Args:
            zulip_name: The sender's full Zulip display name.

        Returns:
            The desk location, or None if no desk matches.
        """
        name = await self.get_correction(zulip_name) or zulip_name
        location = await self.lookup_name(normalize_username(name))
        if location is None:
            logger.debug(f"No desk found for {zulip_name!r} (looked up as {normalize_username(name)!r})")
        return location

    # ------------------------------------------------------------------
    # Corrections
    # ------------------------------------------------------------------

    async def get_correction(self, zulip_name: str) -> str | None:
        """Get the corrected Virtual RC name for a Zulip user, if any."""
        key = normalize_username(zulip_name)
        if not await self._acquire(self._corrections_lock):
            logger.warning("Name corrections are busy, ignoring correction")
            return None
        try:
            return self._corrections.get(key)
        finally:
            self._corrections_lock.release()

    async def set_correction(self, zulip_name: str, corrected_name: str) -> None:
        """Record that a Zulip user is called `corrected_name` in Virtual RC."""
        key = normalize_username(zulip_name)
        async with self._corrections_lock:
            self._corrections[key] = corrected_name.strip()
        logger.info(f"Name correction set: {key!r} -> {corrected_name!r}")

    async def clear_correction(self, zulip_name: str) -> str | None:
        """
        Remove a Zulip user's name correction.

        Returns:
            The correction that was removed, or None if there was none.
        """
        key = normalize_username(zulip_name)
        async with self._corrections_lock:
            previous = self._corrections.pop(key, None)
        if previous is not None:
            logger.info(f"Name correction cleared: {key!r} (was {previous!r})")
        return previous
