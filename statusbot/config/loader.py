"""
Configuration loading.

Locally, settings come from a .env file picked by RUN_MODE:
- RUN_MODE=PROD  -> .env.prod
- anything else  -> .env.devel

On Fly.io (FLY_APP_NAME is set) secrets are already in the environment
and no .env file is read.
"""

import os
from pathlib import Path

from loguru import logger

from statusbot.config.schema import Config
from statusbot.errors import ConfigError

ENV_DEVEL = ".env.devel"
ENV_PROD = ".env.prod"


def get_env_file() -> Path | None:
    """Pick the .env file for the current run mode, or None on Fly.io."""
    if os.environ.get("FLY_APP_NAME"):
        logger.info("Inside fly.io, loading variables from environment")
        return None

    env_file = ENV_PROD if os.environ.get("RUN_MODE") == "PROD" else ENV_DEVEL
    return Path(env_file)


def load_config(env_file: Path | str | None = None, validate: bool = True) -> Config:
    """
    Load configuration from the environment (and a .env file if present).

    Args:
        env_file: Explicit .env file; defaults to the one for RUN_MODE.
        validate: Raise if required settings are missing.

    Returns:
        Loaded configuration.

    Raises:
        ConfigError: If validate is set and required settings are missing.
    """
    path = Path(env_file) if env_file else get_env_file()

    if path is not None and path.exists():
        logger.info(f"Loading configuration from {path}")
        config = Config(_env_file=path)
    else:
        if path is not None:
            logger.debug(f"No {path} file found, using environment only")
        config = Config()

    if validate:
        missing = config.missing_required()
        if missing:
            raise ConfigError(missing)

    return config
