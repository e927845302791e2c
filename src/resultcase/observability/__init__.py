"""Structured logging: context-aware key=value logging for the Result engine."""

from .logging import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogRenderer,
    NoOpRenderer,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)

__all__ = [
    "BoundLogger",
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEntry",
    "LogRenderer",
    "NoOpRenderer",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "log_context",
]
