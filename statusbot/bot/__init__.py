"""Status Bot command execution and replies."""

from statusbot.bot.bot import StatusBot

__all__ = ["StatusBot"]
