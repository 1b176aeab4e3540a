"""
Runtime wiring for the webhook server.

Provides:
- Construction of clients, directory, refresher and bot from Config
- Start/stop of the background directory refresh
- Status information for the health endpoint
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from loguru import logger

from statusbot.bot.bot import StatusBot
from statusbot.commands.emoji import EmojiAliases
from statusbot.commands.parser import set_emoji_aliases
from statusbot.directory.refresher import DirectoryRefresher
from statusbot.directory.store import IdentityDirectory
from statusbot.rc.client import RecurseClient
from statusbot.rc.placement import clamp_position
from statusbot.zulip.client import ZulipClient

if TYPE_CHECKING:
    from statusbot.config.schema import Config


class BotRuntime:
    """
    Owns everything the server needs for its lifetime.

    Either build it from configuration with from_config(), or hand it
    ready-made parts (tests do this with mocks).
    """

    def __init__(
        self,
        bot: StatusBot,
        refresher: DirectoryRefresher | None = None,
        clients: list[Any] | None = None,
    ):
        self.bot = bot
        self.refresher = refresher
        self._clients = list(clients or [])
        self._started_at: datetime | None = None

    @classmethod
    def from_config(cls, config: "Config") -> "BotRuntime":
        """
        Build a runtime from configuration.

        Args:
            config: Loaded (and validated) configuration.

        Returns:
            A runtime that has not been started yet.
        """
        rc = RecurseClient(
            site=config.recurse.site,
            app_id=config.recurse.app_id.get_secret_value(),
            app_secret=config.recurse.app_secret.get_secret_value(),
            bot_id=config.recurse.bot_id,
            timeout=config.request_timeout,
        )

        zulip = None
        if config.zulip.bot_email and config.zulip.bot_api_key.get_secret_value():
            zulip = ZulipClient(
                site=config.zulip.site,
                email=config.zulip.bot_email,
                api_key=config.zulip.bot_api_key.get_secret_value(),
                timeout=config.request_timeout,
            )
        else:
            logger.info("Zulip API key not configured, feedback forwarding disabled")

        aliases = EmojiAliases.from_file(config.emoji_aliases_path or None)
        set_emoji_aliases(aliases)

        directory = IdentityDirectory(rc, lock_timeout=config.directory.lock_timeout)
        refresher = DirectoryRefresher(directory, interval=config.directory.refresh_interval)

        home = clamp_position(config.recurse.home_x or 0, config.recurse.home_y or 0)
        bot = StatusBot(
            rc=rc,
            directory=directory,
            aliases=aliases,
            api_token=config.zulip.bot_api_token.get_secret_value(),
            home=home,
            zulip=zulip,
            maintainers=config.zulip.maintainers,
        )

        clients: list[Any] = [rc]
        if zulip is not None:
            clients.append(zulip)
        return cls(bot=bot, refresher=refresher, clients=clients)

    async def start(self) -> None:
        """Start the background directory refresh."""
        if self.refresher is not None:
            await self.refresher.start()
        self._started_at = datetime.now()

    async def shutdown(self) -> None:
        """Stop the refresher and close HTTP clients."""
        logger.info("Shutting down bot runtime")
        if self.refresher is not None:
            await self.refresher.stop()
        for client in self._clients:
            await client.close()
        self._clients.clear()

    def get_status(self) -> dict[str, Any]:
        directory = self.bot.directory
        refreshed = directory.last_refreshed_at
        status: dict[str, Any] = {
            "status": "ok",
            "directory_size": directory.size,
            "directory_refreshed_at": refreshed.isoformat() if refreshed else None,
            "started_at": self._started_at.isoformat() if self._started_at else None,
        }
        if self.refresher is not None:
            status["refresher"] = {
                "running": self.refresher.is_running,
                **self.refresher.get_stats(),
            }
        return status
