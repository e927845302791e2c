"""Status taxonomy and reserved message keys."""

from __future__ import annotations

from enum import StrEnum


class Status(StrEnum):
    """Closed set of outcome categories attached to every Result.

    One success tag and five failure categories distinguished by what the
    caller should do next: the thing is absent, the input was bad, the remote
    side was unreachable, something else went wrong, or the outcome is unknown
    (e.g. a write whose acknowledgement was lost).
    """
    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    FAILED = "FAILED"
    INDETERMINANT = "INDETERMINANT"


class Variant(StrEnum):
    """Which of the three representable Result states a Result is in.

    EMPTY is SUCCESS-tagged but valueless: the operation category succeeded
    but no value exists, e.g. after a map whose function raised.
    """
    VALUE = "VALUE"
    EMPTY = "EMPTY"
    FAILURE = "FAILURE"


STATUS = "status"
ERROR = "error"
EXCEPTION = "exception"
VALUE = "value"
FAILED_ON = "failed_on"
ORIGINAL_EXCEPTION = "original_exception"

# Stands in for a None input in messages
NULL_PLACEHOLDER = "[null]"
