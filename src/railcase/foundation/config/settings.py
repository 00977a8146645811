"""Environment-based configuration using pydantic-settings.

Example:
    >>> from railcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.fail_fast.mode
    'abort'
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # RAILCASE_LOG_LEVEL=DEBUG
    # RAILCASE_FAILFAST_MODE=exit
    # RAILCASE_FAILFAST_EXIT_CODE=70
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RAILCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


class FailFastSettings(BaseSettings):
    """How the process terminates on a critical fault."""

    model_config = SettingsConfigDict(
        env_prefix="RAILCASE_FAILFAST_",
        extra="ignore",
    )

    mode: Literal["abort", "exit"] = Field(default="abort", description="os.abort() or os._exit(exit_code)")
    exit_code: Annotated[int, Field(ge=1, le=255)] = 134
    log: bool = Field(default=True, description="Emit a critical log entry before terminating")


class RailcaseSettings(BaseSettings):
    """Root settings for railcase.

    Example environment variables:
        RAILCASE_DEBUG=true
        RAILCASE_LOG_FORMAT=json
        RAILCASE_FAILFAST_MODE=exit
    """

    model_config = SettingsConfigDict(
        env_prefix="RAILCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    fail_fast: FailFastSettings = Field(default_factory=FailFastSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """DEBUG whenever debug mode is on, else the configured level."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> RailcaseSettings:
    """Get the global settings instance (cached)."""
    return RailcaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
