"""Configuration schema using Pydantic."""

from typing import Annotated

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecurseConfig(BaseModel):
    """Virtual RC (RC Together) configuration."""
    site: str = ""  # e.g. https://recurse.rctogether.com
    app_id: SecretStr = SecretStr("")  # HTTP Basic auth username
    app_secret: SecretStr = SecretStr("")  # HTTP Basic auth password
    bot_id: str = ""  # Id of the bot avatar the app controls
    home_x: int | None = None  # Where the bot waits between updates
    home_y: int | None = None


class ZulipConfig(BaseModel):
    """Zulip bot configuration."""
    site: str = ""  # e.g. https://recurse.zulipchat.com
    bot_email: str = ""  # e.g. status-bot@recurse.zulipchat.com
    bot_api_key: SecretStr = SecretStr("")  # For sending messages
    bot_api_token: SecretStr = SecretStr("")  # Outgoing webhook token (from zuliprc)
    # Numeric entries are Zulip user ids, anything else an email
    maintainers: list[Annotated[int | str, Field(union_mode="left_to_right")]] = Field(default_factory=list)


class ServerConfig(BaseModel):
    """Webhook server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080


class DirectoryConfig(BaseModel):
    """Desk directory configuration."""
    refresh_interval: float = 60.0  # Seconds between refreshes
    lock_timeout: float = 0.5  # Seconds a lookup waits before treating the directory as unavailable


class Config(BaseSettings):
    """Root configuration for Status Bot."""
    model_config = SettingsConfigDict(
        env_prefix="STATUSBOT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    recurse: RecurseConfig = Field(default_factory=RecurseConfig)
    zulip: ZulipConfig = Field(default_factory=ZulipConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    request_timeout: float = 10.0  # Seconds per outbound HTTP call, single attempt
    emoji_aliases_path: str = ""  # Empty means the bundled Zulip table

    def missing_required(self) -> list[str]:
        """
        List required settings that are not set.

        Returns:
            Environment variable names of the missing settings.
        """
        required = {
            "STATUSBOT_RECURSE__SITE": self.recurse.site,
            "STATUSBOT_RECURSE__APP_ID": self.recurse.app_id.get_secret_value(),
            "STATUSBOT_RECURSE__APP_SECRET": self.recurse.app_secret.get_secret_value(),
            "STATUSBOT_RECURSE__BOT_ID": self.recurse.bot_id,
            "STATUSBOT_RECURSE__HOME_X": self.recurse.home_x,
            "STATUSBOT_RECURSE__HOME_Y": self.recurse.home_y,
            "STATUSBOT_ZULIP__SITE": self.zulip.site,
            "STATUSBOT_ZULIP__BOT_API_TOKEN": self.zulip.bot_api_token.get_secret_value(),
        }
        return [name for name, value in required.items() if value is None or value == ""]
