"""Exceptions raised by resultcase and exception classification for failure origins.

Results carry failures as data; the exceptions here are only raised when a
Result cannot be built at all. The classifier maps native exceptions onto the
closed Status taxonomy so that data-access code can translate a caught
exception in one call.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from resultcase.result.status import Status


class ResultError(Exception):
    """Base class for errors raised by resultcase itself."""


class ResultBuildError(ResultError):
    """Raised by Builder.build() when the staged state cannot form a valid Result."""


# Type checks run first; name patterns catch driver-specific exceptions
# (e.g. psycopg's OperationalError subclasses) that don't share a base class.
_PATTERN_STATUSES: dict[str, str] = {
    "connection": "CONNECTION_FAILED",
    "timeout": "CONNECTION_FAILED",
    "network": "CONNECTION_FAILED",
    "unreachable": "CONNECTION_FAILED",
    "notfound": "NOT_FOUND",
    "missing": "NOT_FOUND",
    "nosuch": "NOT_FOUND",
    "validation": "BAD_REQUEST",
    "invalid": "BAD_REQUEST",
    "malformed": "BAD_REQUEST",
}
_PATTERN_KEYS = tuple(_PATTERN_STATUSES.keys())


@lru_cache(maxsize=256)
def _classify_name(exc_name: str) -> str:
    haystack = exc_name.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_STATUSES[pattern]
    return "FAILED"


def classify_exception(exc: BaseException) -> Status:
    """Map an exception onto the Status a failure origin should report.

    Example:
        >>> classify_exception(ConnectionRefusedError()).name
        'CONNECTION_FAILED'
        >>> classify_exception(KeyError("id")).name
        'NOT_FOUND'
    """
    from resultcase.result.status import Status

    match exc:
        case ConnectionError() | TimeoutError():
            return Status.CONNECTION_FAILED
        case LookupError() | FileNotFoundError():
            return Status.NOT_FOUND
        case ValueError() | TypeError():
            return Status.BAD_REQUEST
    return Status(_classify_name(type(exc).__name__))


def describe_exception(exc: BaseException) -> str:
    """Human-readable description: the exception message, or its class name when empty."""
    return str(exc) or type(exc).__name__


class CapturedException(BaseModel):
    """An exception caught at a callback boundary.

    Attributes:
        stage: Where the exception was caught (e.g. "map", "transaction.commit")
        exc_type: Qualified class name of the exception
        message: Description stored under the Result's ``exception`` message
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    stage: Annotated[str, Field(min_length=1)]
    exc_type: Annotated[str, Field(min_length=1)]
    message: str

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | BaseException) -> str:
        """Accept exception objects and describe them."""
        return describe_exception(v) if isinstance(v, BaseException) else v

    @classmethod
    def capture(cls, stage: str, exc: BaseException) -> Self:
        """Factory from a live exception."""
        exc_cls = type(exc)
        return cls(stage=stage, exc_type=f"{exc_cls.__module__}.{exc_cls.__qualname__}", message=exc)
