"""
Status Bot command execution.

Flow for each Zulip direct message:
1. Resolve the sender to a Virtual RC desk
2. Parse the message into a Command
3. Run the command against Virtual RC / Zulip
4. Build the reply

Nothing raised by a remote call escapes respond(); every failure becomes
reply text.
"""

import hmac
from datetime import datetime, timezone
from typing import Callable

from loguru import logger

from statusbot.bot import replies
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
    parse_command,
)
from statusbot.directory.names import normalize_username
from statusbot.directory.store import DeskLocation, IdentityDirectory
from statusbot.errors import NoOpenPositionError, RecurseError, StatusBotError, ZulipError
from statusbot.rc.client import RecurseClient
from statusbot.rc.models import Desk, DeskUpdate, Position
from statusbot.rc.placement import surrounding_positions
from statusbot.status import Status
from statusbot.zulip.client import ZulipClient
from statusbot.zulip.models import ContentReply, NoReply, OutgoingWebhook, Reply

# Commands that act on the sender's desk
DESK_COMMANDS = (Show, SetStatus, Clear)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusBot:
    """
    Executes parsed commands and renders replies.

    The bot walks its avatar next to a desk before updating it, because
    Virtual RC only accepts desk updates from an adjacent bot, then sends
    the avatar back to its home position.
    """

    def __init__(
        self,
        rc: RecurseClient,
        directory: IdentityDirectory,
        aliases: EmojiAliases,
        api_token: str,
        home: Position,
        zulip: ZulipClient | None = None,
        maintainers: list[int | str] | None = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            rc: Virtual RC client.
            directory: Zulip name -> desk directory.
            aliases: Zulip emoji alias table.
            api_token: Expected outgoing webhook token.
            home: Where the bot avatar waits between updates.
            zulip: Zulip client, used to forward feedback.
            maintainers: Zulip user ids/emails that receive feedback.
            now: Clock, replaceable in tests.
        """
        self.rc = rc
        self.directory = directory
        self.aliases = aliases
        self.home = home
        self.zulip = zulip
        self.maintainers = list(maintainers or [])
        self._api_token = api_token
        self._now = now

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def respond(self, webhook: OutgoingWebhook) -> Reply:
        """
        Handle one outgoing webhook from Zulip.

        Mentions are ignored; only direct messages are treated as commands.
        """
        if not webhook.trigger.is_direct:
            return NoReply()

        if not hmac.compare_digest(webhook.token.encode(), self._api_token.encode()):
            logger.info(
                "Invalid bot token. Received an incoming webhook for a different bot? "
                f"bot_email={webhook.bot_email} bot_full_name={webhook.bot_full_name}"
            )

        sender = webhook.message.sender_full_name
        logger.info(f"Message from {sender!r} (id={webhook.message.sender_id}): {webhook.data!r}")

        try:
            location = await self.directory.lookup(sender)
            command = parse_command(webhook.data, self.aliases)
            return await self.execute(command, sender, location)
        except Exception as e:
            logger.exception(f"Unhandled error while responding to {sender!r}: {e}")
            return ContentReply(replies.failure("handle your message", "Something unexpected went wrong."))

    async def execute(
        self,
        command: Command,
        sender: str,
        location: DeskLocation | None,
    ) -> Reply:
        """
        Run a command for a sender.

        Args:
            command: Parsed command.
            sender: Sender's Zulip display name.
            location: Sender's desk, or None if it could not be found.

        Returns:
            The reply to send back to the sender.
        """
        logger.debug(f"Executing {command!r} for {sender!r} (desk={location})")

        if isinstance(command, DESK_COMMANDS) and location is None:
            return ContentReply(replies.MISSING_DESK)

        try:
            match command:
                case Help():
                    return ContentReply(replies.HELP_TEXT)
                case Show():
                    return await self.cmd_show(location)
                case SetStatus(status=status):
                    return await self.cmd_status(location, status)
                case Clear():
                    return await self.cmd_clear(location)
                case Feedback(text=text):
                    return await self.cmd_feedback(text)
                case SetName(name=name):
                    return await self.cmd_set_name(sender, name)
                case ClearName():
                    return await self.cmd_clear_name(sender)
                case TestMissingDesk():
                    return ContentReply(replies.MISSING_DESK)
                case TestLookupDesk(name=name):
                    return await self.cmd_lookup_desk(name)
                case TestSendHome():
                    return await self.cmd_send_home()
        except NoOpenPositionError as e:
            logger.error(str(e))
            return ContentReply(replies.failure(
                "update your status",
                "Status Bot couldn't find an open spot next to your desk in Virtual RC. "
                "Try again in a little while.",
            ))
        except RecurseError as e:
            logger.error(f"Virtual RC call failed for {command!r}: {e}")
            return ContentReply(replies.failure(_describe(command), f"Virtual RC said: {e}"))
        except ZulipError as e:
            logger.error(f"Zulip call failed for {command!r}: {e}")
            return ContentReply(replies.failure(_describe(command), f"Zulip said: {e}"))
        except StatusBotError as e:
            logger.error(f"{command!r} failed: {e}")
            return ContentReply(replies.failure(_describe(command), str(e)))

        return ContentReply(replies.HELP_TEXT)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def cmd_show(self, location: DeskLocation) -> Reply:
        """`show` - Display the sender's current status."""
        desk = await self.rc.get_desk(location.desk_id)
        status = desk.to_status()
        if status.is_empty:
            return ContentReply(replies.EMPTY_STATUS)
        return ContentReply(replies.current_status(self.render(status)))

    async def cmd_status(self, location: DeskLocation, status: Status) -> Reply:
        """`status` - Set the sender's status on their desk."""
        now = self._now()
        if status.expires_at is not None and status.expires_at <= now:
            return ContentReply(replies.PAST_EXPIRATION)

        update = DeskUpdate.from_status(status.with_default_expiration(now))
        desk = await self.update_desk(location, update)
        return ContentReply(replies.status_set(self.render(desk.to_status())))

    async def cmd_clear(self, location: DeskLocation) -> Reply:
        """`clear` - Remove the emoji, text and expiration from the sender's desk."""
        await self.update_desk(location, DeskUpdate.cleared())
        return ContentReply(replies.STATUS_CLEARED)

    async def cmd_feedback(self, text: str) -> Reply:
        """`feedback` - Forward anonymous feedback to the maintainers."""
        if self.zulip is None or not self.maintainers:
            return ContentReply(replies.FEEDBACK_DISABLED)

        await self.zulip.send_direct_message(
            self.maintainers,
            f"**Status Bot feedback**\n```quote\n{text}\n```",
        )
        return ContentReply(replies.FEEDBACK_SENT)

    async def cmd_set_name(self, sender: str, name: str) -> Reply:
        """`set_name` - Record the sender's Virtual RC name. An empty name clears it."""
        if not name.strip():
            return await self.cmd_clear_name(sender)

        await self.directory.set_correction(sender, name)
        found = await self.directory.lookup_name(normalize_username(name)) is not None
        return ContentReply(replies.name_set(name.strip(), found))

    async def cmd_clear_name(self, sender: str) -> Reply:
        """`clear_name` - Forget the sender's Virtual RC name."""
        previous = await self.directory.clear_correction(sender)
        return ContentReply(replies.name_cleared(previous))

    async def cmd_lookup_desk(self, name: str) -> Reply:
        location = await self.directory.lookup_name(name)
        if location is None:
            return ContentReply(replies.desk_lookup(name, None, None))
        return ContentReply(replies.desk_lookup(name, location.desk_id, location.pos))

    async def cmd_send_home(self) -> Reply:
        await self.rc.move_bot(self.home)
        return ContentReply(replies.sent_home(self.home))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def render(self, status: Status) -> str:
        """Render a status, showing the Zulip emoji name where there is one."""
        alias = self.aliases.to_alias(status.emoji) if status.emoji else None
        return status.render(emoji_alias=alias)

    async def walk_to_desk(self, location: DeskLocation) -> Position:
        """
        Move the bot avatar to the first free cell next to a desk.

        Returns:
            The position the bot moved to.

        Raises:
            NoOpenPositionError: If every surrounding cell was rejected.
        """
        for pos in surrounding_positions(location.pos):
            try:
                await self.rc.move_bot(pos)
            except RecurseError as e:
                logger.debug(f"Could not move bot to ({pos.x}, {pos.y}): {e}")
                continue
            return pos
        raise NoOpenPositionError(location.desk_id, location.pos)

    async def update_desk(self, location: DeskLocation, update: DeskUpdate) -> Desk:
        """Walk next to a desk, update it, then head home."""
        await self.walk_to_desk(location)
        try:
            return await self.rc.update_desk(location.desk_id, update)
        finally:
            await self.go_home()

    async def go_home(self) -> bool:
        """Send the bot avatar home. Failures are logged, never raised."""
        try:
            await self.rc.move_bot(self.home)
        except RecurseError as e:
            logger.warning(f"Failed to send bot home to ({self.home.x}, {self.home.y}): {e}")
            return False
        return True


def _describe(command: Command) -> str:
    """What the user asked for, for use in error replies."""
    match command:
        case SetStatus():
            return "update your status"
        case Show():
            return "fetch your status"
        case Clear():
            return "clear your status"
        case Feedback():
            return "send your feedback"
        case TestSendHome():
            return "go home"
    return "complete your request"
