"""Batch operators: apply a Result-returning function across a collection.

Two semantics:
- Exhaustive (foreach): every input is processed; success only if all
  succeed, otherwise every failing input's messages are aggregated.
- Fail-fast (foreach_fail_fast): stop at the first failing input and
  report which one it was.

Each per-element call goes through the callback boundary, so one element
raising never aborts the batch.

Example:
    >>> import math
    >>> from resultcase import Result
    >>> times_pi = lambda x: Result.builder().success(x * math.pi).build()
    >>> foreach([1, 2], times_pi).value() == [math.pi, 2 * math.pi]
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Generic, NamedTuple, TypeVar

from resultcase.observability import get_logger

from ._callbacks import call_result_function, describe_input
from .builder import Builder
from .status import ERROR, FAILED_ON, Status

if TYPE_CHECKING:
    from .result import Result

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")

_log = get_logger("resultcase.batch")

FAIL_FAST_ERROR = "Failed to process inputs"


class Entry(NamedTuple, Generic[K, V]):
    """A mapping entry handed to the function given to foreach_entry.

    ``str(entry)`` is ``key=value``, which keys the entry's messages when it fails.
    """

    key: K
    value: V

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


def foreach(inputs: Iterable[T], function: Callable[[T], Result[R]]) -> Result[list[R]]:
    """Apply ``function`` to every input (exhaustive).

    Returns SUCCESS with the ordered values when every call succeeds. Otherwise
    FAILED, with each failing input's full message mapping stored under
    ``str(input)`` (``[null]`` for None) and a summary under ``error``.
    An empty input succeeds with an empty list.

    Per-input entries obey the ordinary message rules at build(): an input
    whose ``str()`` is blank loses its entry, and one that reads ``status``
    is overwritten by the status. Both still count in the summary.
    """
    inputs = list(inputs)
    if not inputs:
        return Builder().success([]).build()

    results = [call_result_function(function, item, "foreach") for item in inputs]
    if all(r.is_success() for r in results):
        return Builder().with_status(Status.SUCCESS).with_value([r.value() for r in results]).build()

    builder: Builder[list[R]] = Builder().with_status(Status.FAILED)
    failures = 0
    for item, result in zip(inputs, results):
        if not result.is_success():
            failures += 1
            builder.add_message(describe_input(item), result.messages())
    _log.debug("batch failed", failed=failures, total=len(inputs))
    return builder.add_message(ERROR, f"Failed to process {failures} of {len(inputs)} inputs").build()


def foreach_fail_fast(inputs: Iterable[T], function: Callable[[T], Result[R]]) -> Result[list[R]]:
    """Apply ``function`` to inputs in order, stopping at the first failure.

    The failing call's own messages are discarded; the result only records
    ``error`` ("Failed to process inputs") and ``failed_on`` (the input).
    """
    values: list[R] = []
    for item in inputs:
        result = call_result_function(function, item, "foreach")
        if not result.is_success():
            _log.debug("batch stopped", failed_on=describe_input(item), processed=len(values))
            return Builder().failed(FAIL_FAST_ERROR).add_message(FAILED_ON, describe_input(item)).build()
        values.append(result.value())  # type: ignore[arg-type]
    return Builder().success(values).build()


def foreach_entry(inputs: Mapping[K, V], function: Callable[[Entry[K, V]], Result[R]]) -> Result[list[R]]:
    """Exhaustive foreach over a mapping's entries, in iteration order."""
    return foreach([Entry(k, v) for k, v in inputs.items()], function)


def foreach_value(
    value: Any,
    function: Callable[[Any], Result[R]],
    element_type: type | None = None,
    *,
    fail_fast: bool = False,
) -> Result[list[R]]:
    """Batch over a Result's value: sequences are iterated, anything else is one element.

    With ``element_type``, an element of another type fails that element's call.
    """
    elements = list(value) if _is_sequence(value) else [value]
    if element_type is not None:
        function = _typed(function, element_type)
    return (foreach_fail_fast if fail_fast else foreach)(elements, function)


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple)) and not isinstance(value, Entry)


def _typed(function: Callable[[Any], Result[R]], element_type: type) -> Callable[[Any], Result[R]]:
    def checked(element: object) -> Result[R]:
        if not isinstance(element, element_type):
            raise TypeError(f"expected {element_type.__name__}, got {type(element).__name__}")
        return function(element)
    return checked
