"""CLI module for Status Bot."""

from statusbot.cli.commands import app

__all__ = ["app"]
