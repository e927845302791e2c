"""Exception boundary around user-supplied callbacks.

Every operator that calls external code goes through these helpers. An
``Exception`` raised by the callback becomes a FAILED Result carrying an
``exception`` message; ``BaseException`` subclasses such as
``KeyboardInterrupt`` still propagate.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from resultcase.foundation.config import get_settings
from resultcase.foundation.errors import CapturedException
from resultcase.observability import get_logger

from .builder import Builder
from .status import EXCEPTION, NULL_PLACEHOLDER, VALUE

if TYPE_CHECKING:
    from .result import Result

T = TypeVar("T")
R = TypeVar("R")

_log = get_logger("resultcase.callbacks")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD,
               inspect.Parameter.VAR_POSITIONAL)


def accepts_argument(fn: Callable[..., Any]) -> bool:
    """Whether ``fn`` takes a positional argument (a function) or none (a supplier).

    Classes (``int``, ``dict``, an exception type) are suppliers unless they
    require a positional argument, so ``or_else_get(int)`` yields ``0``.
    Other callables whose signature can't be inspected are functions.
    """
    is_class = isinstance(fn, type)
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return not is_class
    if is_class:
        return any(p.kind in _POSITIONAL[:2] and p.default is p.empty for p in params)
    return any(p.kind in _POSITIONAL for p in params)


def call_adapted(fn: Callable[..., R], arg: object) -> R:
    """Call ``fn(arg)`` if it takes an argument, else ``fn()``."""
    return fn(arg) if accepts_argument(fn) else fn()


def describe_input(value: object) -> str:
    return NULL_PLACEHOLDER if value is None else str(value)


def capture(stage: str, exc: BaseException) -> CapturedException:
    """Describe ``exc`` and log it according to ResultSettings."""
    captured = CapturedException.capture(stage, exc)
    settings = get_settings().result
    if settings.log_captured_exceptions:
        _log.log(settings.captured_exception_level, "callback raised",
                 stage=captured.stage, exc_type=captured.exc_type, exception=captured.message)
    return captured


def ensure_result(returned: object, stage: str) -> Result[Any]:
    from .result import Result

    if not isinstance(returned, Result):
        raise TypeError(f"{stage} callback returned {type(returned).__name__}, expected Result")
    return returned


def call_result_function(fn: Callable[[T], Result[R]], value: T, stage: str = "function") -> Result[R]:
    """Call a Result-returning function; an exception becomes FAILED with ``exception`` and ``value``."""
    try:
        return ensure_result(fn(value), stage)
    except Exception as e:
        return (
            Builder()
            .failed("Exception thrown in specified function")
            .add_message(EXCEPTION, capture(stage, e).message)
            .add_message(VALUE, describe_input(value))
            .build()
        )


def call_result_supplier(fn: Callable[[], Result[R]], stage: str = "supplier") -> Result[R]:
    """Call a Result-returning supplier; an exception becomes FAILED with ``exception``."""
    try:
        return ensure_result(fn(), stage)
    except Exception as e:
        return (
            Builder()
            .failed("Exception thrown in specified supplier")
            .add_message(EXCEPTION, capture(stage, e).message)
            .build()
        )


def call_branch(fn: Callable[..., Result[R]], value: object, stage: str) -> Result[R]:
    """Dispatch to call_result_function or call_result_supplier by the callable's arity."""
    if accepts_argument(fn):
        return call_result_function(fn, value, stage)
    return call_result_supplier(fn, stage)
