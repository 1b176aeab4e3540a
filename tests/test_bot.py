"""
Tests for the Status Bot command executor.

Tests:
- Webhook handling (trigger, token, desk lookup)
- Status set/show/clear against a mock Virtual RC
- Walking next to a desk and returning home
- Name corrections, feedback and diagnostics
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, call

import pytest

from statusbot.bot import replies
from statusbot.bot.bot import StatusBot
from statusbot.commands.parser import SetStatus, Show
from statusbot.errors import RecurseError, ZulipError
from statusbot.rc.models import DeskUpdate, Position
from statusbot.status import Status
from statusbot.zulip.models import ContentReply, NoReply, OutgoingWebhook

from tests.conftest import make_bot_entity, make_desk

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
HOME = Position(x=100, y=100)
TOKEN = "secret-token"


def make_webhook(data: str, sender: str = "Ada Lovelace (she/her)", trigger: str = "direct_message", token: str = TOKEN):
    return OutgoingWebhook.model_validate({
        "bot_email": "status-bot@zulip.example.com",
        "bot_full_name": "Status Bot",
        "data": data,
        "trigger": trigger,
        "token": token,
        "message": {
            "id": 1,
            "sender_id": 7,
            "sender_full_name": sender,
            "sender_email": "ada@example.com",
            "content": data,
            "type": "private",
        },
    })


@pytest.fixture
def zulip():
    client = AsyncMock()
    client.send_direct_message = AsyncMock(return_value=123)
    return client


@pytest.fixture
def bot(rc, directory, aliases, zulip):
    return StatusBot(
        rc=rc,
        directory=directory,
        aliases=aliases,
        api_token=TOKEN,
        home=HOME,
        zulip=zulip,
        maintainers=["maintainer@example.com"],
        now=lambda: NOW,
    )


def content(reply) -> str:
    assert isinstance(reply, ContentReply)
    return reply.content


class TestRespond:
    """Test webhook entry point."""

    @pytest.mark.asyncio
    async def test_mention_is_ignored(self, bot, rc):
        reply = await bot.respond(make_webhook("status busy", trigger="mention"))
        assert reply == NoReply()
        rc.move_bot.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_private_message_trigger(self, bot):
        reply = await bot.respond(make_webhook("help", trigger="private_message"))
        assert content(reply) == replies.HELP_TEXT

    @pytest.mark.asyncio
    async def test_help(self, bot):
        reply = await bot.respond(make_webhook("what can you do"))
        assert content(reply) == replies.HELP_TEXT

    @pytest.mark.asyncio
    async def test_token_mismatch_still_handled(self, bot):
        """Test a wrong token is only logged."""
        reply = await bot.respond(make_webhook("help", token="other"))
        assert content(reply) == replies.HELP_TEXT

    @pytest.mark.asyncio
    async def test_missing_desk(self, bot, rc):
        reply = await bot.respond(make_webhook("status busy", sender="Nobody (he/him)"))
        assert content(reply) == replies.MISSING_DESK
        rc.move_bot.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_desk_not_needed_for_help(self, bot):
        reply = await bot.respond(make_webhook("help", sender="Nobody"))
        assert content(reply) == replies.HELP_TEXT

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_reply(self, bot, rc):
        """Test nothing escapes respond()."""
        rc.get_desk.side_effect = RuntimeError("boom")
        reply = await bot.respond(make_webhook("show"))
        assert "Sorry, Status Bot was unable to" in content(reply)

    @pytest.mark.asyncio
    async def test_reply_json(self, bot):
        reply = await bot.respond(make_webhook("help"))
        assert reply.to_json() == {"content": replies.HELP_TEXT}
        assert NoReply().to_json() == {"response_not_required": True}


class TestSetStatus:
    """Test `status`."""

    @pytest.mark.asyncio
    async def test_sets_status_with_default_expiration(self, bot, rc):
        expires = NOW + timedelta(minutes=30)
        rc.update_desk.return_value = make_desk(1, "Ada Lovelace", emoji="🦀", status="busy", expires_at=expires)

        reply = await bot.respond(make_webhook("status :crab: busy"))

        rc.update_desk.assert_awaited_once_with(
            1, DeskUpdate(emoji="🦀", status="busy", expires_at=expires)
        )
        assert content(reply) == f"Status set! :crab: busy <time:{expires.isoformat()}>"

    @pytest.mark.asyncio
    async def test_walks_next_to_desk_then_home(self, bot, rc):
        """Test the bot moves beside the desk before updating and goes home after."""
        rc.update_desk.return_value = make_desk(1, "Ada Lovelace", emoji="🦀")

        await bot.respond(make_webhook("status :crab:"))

        assert rc.move_bot.await_args_list == [
            call(Position(x=9, y=20)),
            call(HOME),
        ]

    @pytest.mark.asyncio
    async def test_tries_next_position_when_taken(self, bot, rc):
        rc.move_bot.side_effect = [
            RecurseError("occupied"),
            RecurseError("occupied"),
            make_bot_entity(10, 19),
            make_bot_entity(100, 100),
        ]
        rc.update_desk.return_value = make_desk(1, "Ada Lovelace", emoji="🦀")

        reply = await bot.respond(make_webhook("status :crab:"))

        assert content(reply).startswith("Status set!")
        assert [c.args[0] for c in rc.move_bot.await_args_list] == [
            Position(x=9, y=20),
            Position(x=11, y=20),
            Position(x=10, y=19),
            HOME,
        ]
        rc.update_desk.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_open_position(self, bot, rc):
        """Test every surrounding cell being taken gives a friendly error."""
        rc.move_bot.side_effect = RecurseError("occupied")

        reply = await bot.respond(make_webhook("status busy"))

        assert "couldn't find an open spot" in content(reply)
        assert rc.move_bot.await_count == 8
        rc.update_desk.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_failure_still_goes_home(self, bot, rc):
        rc.update_desk.side_effect = RecurseError("The Virtual RC API fell over because of our request")

        reply = await bot.respond(make_webhook("status busy"))

        assert "Sorry, Status Bot was unable to update your status" in content(reply)
        assert "fell over" in content(reply)
        assert rc.move_bot.await_args_list[-1] == call(HOME)

    @pytest.mark.asyncio
    async def test_home_failure_is_ignored(self, bot, rc):
        rc.move_bot.side_effect = [make_bot_entity(9, 20), RecurseError("blocked")]
        rc.update_desk.return_value = make_desk(1, "Ada Lovelace", status="busy", expires_at=NOW)

        reply = await bot.respond(make_webhook("status busy"))

        assert content(reply).startswith("Status set! busy")

    @pytest.mark.asyncio
    async def test_past_expiration_rejected(self, bot, rc):
        reply = await bot.respond(make_webhook("status busy <time:2024-01-01T10:00:00-04:00>"))

        assert content(reply) == replies.PAST_EXPIRATION
        rc.move_bot.assert_not_awaited()
        rc.update_desk.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_explicit_expiration_kept(self, bot, rc):
        later = datetime(2025, 1, 1, 13, 0, tzinfo=timezone(timedelta(hours=-4)))
        rc.update_desk.return_value = make_desk(1, "Ada Lovelace", status="busy", expires_at=later)

        await bot.respond(make_webhook("status busy <time:2025-01-01T13:00:00-04:00>"))

        assert rc.update_desk.await_args.args[1].expires_at == later

    @pytest.mark.asyncio
    async def test_execute_with_location(self, bot, rc, directory):
        """Test execute() directly with a resolved desk."""
        rc.update_desk.return_value = make_desk(2, "Jacob Young", emoji="🍐")

        reply = await bot.execute(
            SetStatus(Status(emoji="🍐")),
            "Jacob Young",
            await directory.lookup("Jacob Young"),
        )

        assert content(reply) == "Status set! :pear:"
        assert rc.update_desk.await_args.args[0] == 2


class TestShowAndClear:
    """Test `show` and `clear`."""

    @pytest.mark.asyncio
    async def test_show(self, bot, rc):
        rc.get_desk.return_value = make_desk(1, "Ada Lovelace", emoji="🍱", status="lunch")

        reply = await bot.respond(make_webhook("show"))

        rc.get_desk.assert_awaited_once_with(1)
        assert content(reply) == "**Your current status**: :bento: lunch"

    @pytest.mark.asyncio
    async def test_show_empty(self, bot, rc):
        rc.get_desk.return_value = make_desk(1, "Ada Lovelace")
        reply = await bot.respond(make_webhook("show"))
        assert content(reply) == replies.EMPTY_STATUS

    @pytest.mark.asyncio
    async def test_show_failure(self, bot, rc):
        rc.get_desk.side_effect = RecurseError("Did not find a Virtual RC desk with id = 1")
        reply = await bot.respond(make_webhook("show"))
        assert "unable to fetch your status" in content(reply)

    @pytest.mark.asyncio
    async def test_show_without_desk(self, bot):
        reply = await bot.execute(Show(), "Nobody", None)
        assert content(reply) == replies.MISSING_DESK

    @pytest.mark.asyncio
    async def test_clear(self, bot, rc):
        rc.update_desk.return_value = make_desk(1, "Ada Lovelace")

        reply = await bot.respond(make_webhook("clear"))

        rc.update_desk.assert_awaited_once_with(1, DeskUpdate(emoji=None, status=None, expires_at=None))
        assert content(reply) == replies.STATUS_CLEARED
        assert rc.move_bot.await_args_list[-1] == call(HOME)


class TestNames:
    """Test `set_name` and `clear_name`."""

    @pytest.mark.asyncio
    async def test_set_name_fixes_lookup(self, bot, rc):
        reply = await bot.respond(make_webhook("set_name Ada Lovelace", sender="Ada L"))
        assert "**Ada Lovelace**" in content(reply)
        assert "couldn't find" not in content(reply)

        rc.get_desk.return_value = make_desk(1, "Ada Lovelace")
        reply = await bot.respond(make_webhook("show", sender="Ada L"))
        assert content(reply) == replies.EMPTY_STATUS

    @pytest.mark.asyncio
    async def test_set_name_unknown_warns(self, bot):
        reply = await bot.respond(make_webhook("set_name Not A Person", sender="Ada L"))
        assert "couldn't find a desk owned by **Not A Person**" in content(reply)

    @pytest.mark.asyncio
    async def test_set_name_empty_clears(self, bot, directory):
        await directory.set_correction("Ada L", "Ada Lovelace")

        reply = await bot.respond(make_webhook("set_name", sender="Ada L"))

        assert content(reply) == replies.name_cleared("Ada Lovelace")
        assert await directory.get_correction("Ada L") is None

    @pytest.mark.asyncio
    async def test_clear_name(self, bot, directory):
        await directory.set_correction("Ada L", "Ada Lovelace")

        reply = await bot.respond(make_webhook("clear_name", sender="Ada L"))

        assert "Forgot your Virtual RC name **Ada Lovelace**" in content(reply)
        assert await directory.get_correction("Ada L") is None

    @pytest.mark.asyncio
    async def test_clear_name_when_unset(self, bot):
        reply = await bot.respond(make_webhook("clear_name", sender="Ada L"))
        assert content(reply) == replies.name_cleared(None)


class TestFeedback:
    """Test `feedback`."""

    @pytest.mark.asyncio
    async def test_forwarded_to_maintainers(self, bot, zulip):
        reply = await bot.respond(make_webhook("feedback love it"))

        assert content(reply) == replies.FEEDBACK_SENT
        zulip.send_direct_message.assert_awaited_once()
        to, message = zulip.send_direct_message.await_args.args
        assert to == ["maintainer@example.com"]
        assert "love it" in message
        assert "Ada" not in message

    @pytest.mark.asyncio
    async def test_no_maintainers(self, rc, directory, aliases, zulip):
        bot = StatusBot(rc=rc, directory=directory, aliases=aliases, api_token=TOKEN, home=HOME, zulip=zulip)

        reply = await bot.respond(make_webhook("feedback love it"))

        assert content(reply) == replies.FEEDBACK_DISABLED
        zulip.send_direct_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zulip_failure(self, bot, zulip):
        zulip.send_direct_message.side_effect = ZulipError("Zulip did not respond in time")

        reply = await bot.respond(make_webhook("feedback love it"))

        assert "unable to send your feedback" in content(reply)


class TestDiagnostics:
    """Test the test_* commands."""

    @pytest.mark.asyncio
    async def test_missing_desk(self, bot):
        reply = await bot.respond(make_webhook("test_missing_desk"))
        assert content(reply) == replies.MISSING_DESK

    @pytest.mark.asyncio
    async def test_lookup_desk(self, bot):
        reply = await bot.respond(make_webhook("test_lookup_desk Jacob Young"))
        assert content(reply) == "Desk for **Jacob Young**: id = 2, pos = (30, 40)"

    @pytest.mark.asyncio
    async def test_lookup_desk_unknown(self, bot):
        reply = await bot.respond(make_webhook("test_lookup_desk Nobody"))
        assert content(reply) == "No desk found for **Nobody**"

    @pytest.mark.asyncio
    async def test_send_home(self, bot, rc):
        reply = await bot.respond(make_webhook("test_send_home"))
        rc.move_bot.assert_awaited_once_with(HOME)
        assert content(reply) == "Status Bot went home to (100, 100)"
