"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    AbsurdioSettings,
    DemoSettings,
    LoggingSettings,
    SupervisorSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "AbsurdioSettings",
    "DemoSettings",
    "LoggingSettings",
    "SupervisorSettings",
    "clear_settings_cache",
    "get_settings",
]
