"""Foundation: configuration shared by the rest of the package."""

from .config import RailcaseSettings, clear_settings_cache, get_settings

__all__ = ["RailcaseSettings", "clear_settings_cache", "get_settings"]
