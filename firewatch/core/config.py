"""Configuration management for Fire Watch."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

DEFAULT_CONFIG_PATH = Path("config.json")

FIRE_ALERT_TYPES = [
    "Red Flag Warning",
    "Fire Weather Watch",
    "Fire Warning",
    "Extreme Fire Danger",
]


class ConfigurationError(Exception):
    """Raised when required startup configuration is missing or invalid."""


class GeneralConfig(BaseModel):
    """General application configuration."""

    log_level: str = "INFO"
    log_format: str = "console"


class FeedConfig(BaseModel):
    """Configuration for the NWS active-alerts feed."""

    url: str = "https://api.weather.gov/alerts/active"
    user_agent: str = "FireWeatherBot/1.0 (Discord Notification Bot)"
    timeout_seconds: float = 30.0
    alert_types: list[str] = Field(default_factory=lambda: list(FIRE_ALERT_TYPES))
    server_side_filter: bool = False


class PollingConfig(BaseModel):
    """Configuration for the poll cycle and dedup tracker."""

    interval_seconds: float = 60.0
    delivery_spacing_seconds: float = 1.0
    high_water_mark: int = Field(default=1000, ge=1)
    retain_count: int = Field(default=500, ge=0)

    @model_validator(mode="after")
    def _check_retain_count(self) -> PollingConfig:
        if self.retain_count > self.high_water_mark:
            raise ValueError("retain_count must not exceed high_water_mark")
        return self


class CommandsConfig(BaseModel):
    """Configuration for the channel command listener."""

    enabled: bool = True
    prefix: str = "!"
    poll_interval_seconds: float = 5.0


class DiscordConfig(BaseModel):
    """Discord REST API configuration."""

    api_base: str = "https://discord.com/api/v10"
    timeout_seconds: float = 10.0
    startup_message: bool = True


class Config(BaseModel):
    """Main configuration container."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    discord: DiscordConfig = Field(default_factory=DiscordConfig)


class Credentials(BaseModel):
    """Discord credentials loaded from the config file or environment."""

    discord_token: str
    discord_channel_id: str

    @classmethod
    def from_env(cls) -> Credentials:
        """Load credentials from environment variables (and .env).

        Raises:
            ConfigurationError: If either value is missing.
        """
        load_dotenv()
        token = os.getenv("DISCORD_TOKEN", "").strip()
        channel_id = os.getenv("DISCORD_CHANNEL_ID", "").strip()

        missing = [
            name
            for name, value in (("DISCORD_TOKEN", token), ("DISCORD_CHANNEL_ID", channel_id))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required setting(s): {', '.join(missing)}. "
                "Run 'firewatch init' or set them in the environment."
            )

        return cls(discord_token=token, discord_channel_id=channel_id)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> Credentials:
        """Load credentials, preferring the config file over the environment.

        Args:
            config_path: Path to config file. Defaults to ./config.json.

        Returns:
            Loaded credentials.

        Raises:
            ConfigurationError: If no complete set of credentials is found.
        """
        data = _read_config_file(config_path)
        token = str(data.get("DISCORD_TOKEN") or "").strip()
        channel_id = str(data.get("DISCORD_CHANNEL_ID") or "").strip()

        if token and channel_id:
            return cls(discord_token=token, discord_channel_id=channel_id)

        return cls.from_env()


def _read_config_file(config_path: str | Path | None) -> dict[str, Any]:
    """Read the raw JSON config, returning {} when the file is absent."""
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a JSON object")

    return data


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from JSON file.

    Credential keys (DISCORD_TOKEN, DISCORD_CHANNEL_ID) may share the file
    and are ignored here.

    Args:
        config_path: Path to config file. Defaults to ./config.json.

    Returns:
        Loaded configuration object.

    Raises:
        ConfigurationError: If the file exists but is invalid.
    """
    data = _read_config_file(config_path)

    sections = {
        name: data[name]
        for name in ("general", "feed", "polling", "commands", "discord")
        if name in data
    }

    try:
        return Config(**sections)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def save_credentials(
    token: str,
    channel_id: str,
    config_path: str | Path | None = None,
) -> Path:
    """Write Discord credentials into the config file, keeping other keys.

    Args:
        token: Discord bot token.
        channel_id: Destination channel ID.
        config_path: Path to config file. Defaults to ./config.json.

    Returns:
        Path written.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    data = _read_config_file(config_path)
    data["DISCORD_TOKEN"] = token.strip()
    data["DISCORD_CHANNEL_ID"] = channel_id.strip()

    with open(config_path, "w") as f:
        json.dump(data, f, indent=2)

    return config_path
