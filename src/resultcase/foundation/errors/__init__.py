"""Error handling primitives for resultcase.

- ResultError/ResultBuildError: exceptions raised when a Result cannot be built
- CapturedException: description of an exception caught at a callback boundary
- classify_exception: map native exceptions onto the Status taxonomy
"""

from .errors import (
    CapturedException,
    ResultBuildError,
    ResultError,
    classify_exception,
    describe_exception,
)
from .types import JsonDict, JsonMapping, JsonPrimitive, JsonValue

__all__ = [
    "ResultError", "ResultBuildError", "CapturedException",
    "classify_exception", "describe_exception",
    "JsonDict", "JsonMapping", "JsonPrimitive", "JsonValue",
]
