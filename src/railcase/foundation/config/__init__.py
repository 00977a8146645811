"""Configuration management using pydantic-settings."""

from .settings import (
    FailFastSettings,
    LoggingSettings,
    RailcaseSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "FailFastSettings",
    "LoggingSettings",
    "RailcaseSettings",
    "clear_settings_cache",
    "get_settings",
]
