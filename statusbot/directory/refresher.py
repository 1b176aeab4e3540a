"""
Background refresh of the identity directory.

Runs for the lifetime of the server, independent of request handling.
"""

import asyncio

from loguru import logger

from statusbot.directory.store import IdentityDirectory
from statusbot.errors import DirectoryFetchError

DEFAULT_REFRESH_INTERVAL = 60.0


class DirectoryRefresher:
    """
    Periodically rebuilds the identity directory.

    The first refresh happens immediately on start(); after that one runs
    every `interval` seconds. A failed refresh is logged and the previous
    table keeps serving lookups.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        self.directory = directory
        self.interval = interval

        self._running = False
        self._task: asyncio.Task | None = None
        self._success_count = 0
        self._error_count = 0

    @property
    def is_running(self) -> bool:
        return self._running

    def get_stats(self) -> dict[str, int]:
        return {
            "successes": self._success_count,
            "errors": self._error_count,
        }

    async def start(self) -> None:
        """Start the refresh loop."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info(f"Directory refresher started (every {self.interval:g}s)")

    async def stop(self) -> None:
        """Stop the refresh loop and wait for it to finish."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Directory refresher stopped")

    async def refresh_once(self) -> bool:
        """
        Run a single refresh.

        Returns:
            True if the directory was rebuilt.
        """
        try:
            count = await self.directory.refresh()
        except DirectoryFetchError as e:
            self._error_count += 1
            logger.warning(f"Desk directory refresh failed, keeping previous table: {e}")
            return False

        self._success_count += 1
        logger.debug(f"Desk directory refresh ok ({count} desks)")
        return True

    async def _refresh_loop(self) -> None:
        while self._running:
            try:
                await self.refresh_once()
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in directory refresh loop: {e}")
                await asyncio.sleep(self.interval)
