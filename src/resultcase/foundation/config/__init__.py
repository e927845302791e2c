"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    ResultcaseSettings,
    ResultSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "ResultSettings",
    "ResultcaseSettings",
    "clear_settings_cache",
    "get_settings",
]
