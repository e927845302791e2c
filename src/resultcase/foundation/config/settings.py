"""Environment-based configuration using pydantic-settings.

Example:
    >>> from resultcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.logging.level
    'INFO'
    >>> settings.result.log_captured_exceptions
    True

    # Or with environment variables:
    # RESULTCASE_LOG_LEVEL=DEBUG
    # RESULTCASE_RESULT_CAPTURED_EXCEPTION_LEVEL=warning
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RESULTCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force console colors (None = auto-detect)")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ResultSettings(BaseSettings):
    """How Result operators report exceptions caught at callback boundaries."""

    model_config = SettingsConfigDict(
        env_prefix="RESULTCASE_RESULT_",
        extra="ignore",
    )

    log_captured_exceptions: bool = Field(
        default=True,
        description="Log exceptions raised by user callbacks before converting them to FAILED results",
    )
    captured_exception_level: Literal["debug", "info", "warning", "error"] = "debug"

    @field_validator("captured_exception_level", mode="before")
    @classmethod
    def _lower_level(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


class ResultcaseSettings(BaseSettings):
    """Root settings for resultcase.

    Loads configuration from environment variables with RESULTCASE_ prefix.

    Example environment variables:
        RESULTCASE_LOG_FORMAT=json
        RESULTCASE_RESULT_LOG_CAPTURED_EXCEPTIONS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="RESULTCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    result: ResultSettings = Field(default_factory=ResultSettings)


@lru_cache(maxsize=1)
def get_settings() -> ResultcaseSettings:
    """Get the global settings instance (cached)."""
    return ResultcaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() call re-reads the environment."""
    get_settings.cache_clear()
