"""Validated construction of Results.

The Builder is the only way to create a Result. It is a mutable staging area
and is not thread-safe: confine each instance to one construction chain.

Example:
    >>> from resultcase import Result
    >>> result = (
    ...     Result.builder()
    ...     .not_found("account does not exist")
    ...     .add_message("account_id", 42)
    ...     .build()
    ... )
    >>> result.message("error")
    'account does not exist'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Generic, Self, TypeVar

from resultcase.foundation.errors import ResultBuildError, classify_exception, describe_exception
from resultcase.observability import get_logger

from .messages import clean, push_back, push_back_all
from .status import ERROR, EXCEPTION, STATUS, Status

if TYPE_CHECKING:
    from .result import Result

V = TypeVar("V")

_log = get_logger("resultcase.builder")

_MISSING_STATUS = "The status must be specified and cannot be null"


class Builder(Generic[V]):
    """Accumulates value, status and messages; build() validates and freezes them."""

    __slots__ = ("_value", "_status", "_messages")

    def __init__(self) -> None:
        self._value: V | None = None
        self._status: Status | None = None
        self._messages: dict[str, object] = {}

    # ─── Raw setters ─────────────────────────────────────────────────

    def with_value(self, value: V | None) -> Self:
        self._value = value
        return self

    def with_status(self, status: Status | str) -> Self:
        self._status = Status(status)
        return self

    def add_message(self, key: str, message: object) -> Self:
        """Record a message; an existing value under ``key`` shifts to ``key_``."""
        push_back(self._messages, key, message)
        return self

    def add_messages(self, messages: Mapping[str, object]) -> Self:
        push_back_all(self._messages, messages)
        return self

    # ─── Status shortcuts ────────────────────────────────────────────

    def success(self, value: V) -> Self:
        self._status = Status.SUCCESS
        self._value = value
        return self

    def not_found(self, message: str) -> Self:
        return self._fail(Status.NOT_FOUND, message)

    def bad_request(self, message: str) -> Self:
        return self._fail(Status.BAD_REQUEST, message)

    def failed(self, message: str) -> Self:
        return self._fail(Status.FAILED, message)

    def connection_failed(self, message: str) -> Self:
        return self._fail(Status.CONNECTION_FAILED, message)

    def indeterminant(self, message: str) -> Self:
        return self._fail(Status.INDETERMINANT, message)

    def from_exception(self, exc: BaseException, message: str | None = None) -> Self:
        """Classify ``exc`` into a status and record it.

        ``message`` becomes the ``error`` entry (defaults to the exception's
        description); the description is always kept under ``exception``.
        """
        description = describe_exception(exc)
        self._fail(classify_exception(exc), message or description)
        push_back(self._messages, EXCEPTION, description)
        return self

    def _fail(self, status: Status, message: str) -> Self:
        self._status = status
        push_back(self._messages, ERROR, message)
        return self

    # ─── Finalization ────────────────────────────────────────────────

    def build(self) -> Result[V]:
        """Validate the staged state and return an immutable Result.

        Raises:
            ResultBuildError: If no status was set
        """
        from .result import Result

        if (status := self._status) is None:
            _log.error(_MISSING_STATUS)
            raise ResultBuildError(_MISSING_STATUS)

        messages = clean(self._messages)
        value = self._value
        if status is not Status.SUCCESS:
            value = None
            messages.setdefault(ERROR, f"Operation failed with status {status}")
        messages[STATUS] = status
        return Result._create(value, status, messages)
