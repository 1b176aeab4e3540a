"""Webhook server for Status Bot."""

from statusbot.server.main import create_app

__all__ = ["create_app"]
