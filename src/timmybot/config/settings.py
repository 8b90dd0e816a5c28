"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import (
    AudioConstants,
    DatabaseTables,
    DatabaseURLSchemes,
    LimitConstants,
)
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.validators import validate_discord_snowflake, validate_sql_identifier


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/timmybot.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )
    queue_table: str = Field(
        default=DatabaseTables.GUILD_QUEUES,
        validation_alias=AliasChoices("queue_table", "queue_table_name"),
    )
    allowlist_table: str = Field(
        default=DatabaseTables.SERVER_ALLOWLIST,
        validation_alias=AliasChoices("allowlist_table", "allowlist_table_name"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if v != DatabaseURLSchemes.MEMORY and not v.startswith(DatabaseURLSchemes.SQLITE):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v

    @field_validator("queue_table", "allowlist_table")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        return validate_sql_identifier(v)


class StoreSettings(BaseModel):
    """Queue store behaviour: timeouts, batch limits, and cache lifetime."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    operation_timeout_s: float = Field(
        default=LimitConstants.DEFAULT_STORE_TIMEOUT_SECONDS,
        gt=0.0,
        le=30.0,
        validation_alias=AliasChoices("operation_timeout_s", "timeout"),
    )
    max_batch_delete: int = Field(
        default=LimitConstants.DEFAULT_MAX_BATCH_DELETE,
        ge=1,
        le=100,
        validation_alias=AliasChoices("max_batch_delete", "batch_size"),
    )
    cache_idle_minutes: int = Field(default=30, ge=1, le=1440)


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="?",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = False

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        # JSON arrays from env vars arrive as lists
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v

    @field_validator("command_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if v != v.strip():
            raise ValueError("command_prefix cannot contain whitespace")
        return v


class AccessSettings(BaseModel):
    """Texts shown to guilds that are not on the allowlist."""

    model_config = SettingsConfigDict(frozen=True)

    contact: str = Field(default="Please contact an administrator.", min_length=1)
    self_host_url: str = ""


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(default=AudioConstants.DEFAULT_VOLUME, ge=0.0, le=2.0)
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT,
            "options": AudioConstants.FFMPEG_OPTIONS_DEFAULT,
        }
    )
    ytdlp_format: str = AudioConstants.YTDLP_FORMAT_DEFAULT
    connect_timeout_s: float = Field(default=AudioConstants.CONNECT_TIMEOUT_SECONDS, gt=0)


class MaintenanceSettings(BaseModel):
    """Periodic cooldown sweep and cache eviction."""

    model_config = SettingsConfigDict(frozen=True)

    interval_minutes: int = Field(default=10, ge=1)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX, etc. (nested with ``__``)
    - DATABASE__URL, DATABASE__QUEUE_TABLE, DATABASE__ALLOWLIST_TABLE
    - STORE__OPERATION_TIMEOUT_S, STORE__MAX_BATCH_DELETE
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    access: AccessSettings = Field(default_factory=AccessSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    maintenance: MaintenanceSettings = Field(default_factory=MaintenanceSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
