"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from absurdio.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.supervisor.drain_timeout
    1.0
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # ABSURDIO_SUPERVISOR_DRAIN_TIMEOUT=0
    # ABSURDIO_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ABSURDIO_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force ANSI colors (None = auto-detect)")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class SupervisorSettings(BaseSettings):
    """Fail-fast group defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ABSURDIO_SUPERVISOR_",
        extra="ignore",
    )

    drain_timeout: NonNegativeFloat = Field(
        default=1.0,
        description="Seconds to let cancelled siblings unwind before reporting (0 = don't wait)",
    )
    group_name: str = Field(default="main", min_length=1)


class DemoSettings(BaseSettings):
    """Parameters of the bundled heartbeat/counter demo."""

    model_config = SettingsConfigDict(
        env_prefix="ABSURDIO_DEMO_",
        extra="ignore",
    )

    interval: PositiveFloat = Field(default=1.0, description="Sleep between ticks in seconds")
    fail_after: PositiveInt = Field(default=3, description="Counter value that makes the counter task fail")


class AbsurdioSettings(BaseSettings):
    """Root settings for absurdio.

    Loads configuration from environment variables with ABSURDIO_ prefix.

    Example environment variables:
        ABSURDIO_LOG_FORMAT=json
        ABSURDIO_SUPERVISOR_DRAIN_TIMEOUT=2.5
        ABSURDIO_DEMO_FAIL_AFTER=5
    """

    model_config = SettingsConfigDict(
        env_prefix="ABSURDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    supervisor: SupervisorSettings = Field(default_factory=SupervisorSettings)
    demo: DemoSettings = Field(default_factory=DemoSettings)

    @computed_field
    @property
    def log_level(self) -> str:
        """Effective log level; debug mode forces DEBUG."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> AbsurdioSettings:
    """Get the global settings instance (cached)."""
    return AbsurdioSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
