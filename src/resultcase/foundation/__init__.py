"""Foundation: errors and configuration shared by the Result engine."""

from .config import (
    LoggingSettings,
    ResultcaseSettings,
    ResultSettings,
    clear_settings_cache,
    get_settings,
)
from .errors import (
    CapturedException,
    JsonDict,
    JsonValue,
    ResultBuildError,
    ResultError,
    classify_exception,
    describe_exception,
)

__all__ = [
    # Errors
    "ResultError", "ResultBuildError", "CapturedException",
    "classify_exception", "describe_exception", "JsonDict", "JsonValue",
    # Config
    "LoggingSettings", "ResultSettings", "ResultcaseSettings",
    "get_settings", "clear_settings_cache",
]
