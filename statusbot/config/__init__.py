"""Configuration module for Status Bot."""

from statusbot.config.loader import load_config
from statusbot.config.schema import Config

__all__ = ["Config", "load_config"]
