"""Transaction combinator: tie commit/rollback of a handle to a bounded operation's outcome.

The bounded operation runs first. If the handle owns the transaction (always,
or when ``is_new(handle)`` holds), a successful outcome is committed and a
failed one rolled back; the bounded Result is returned through the
commit/rollback Result, so a failing commit fails the chain. A handle that
joined an outer transaction is left alone.

Any exception from the bounded operation, the predicate, commit or rollback
triggers recovery: one more rollback attempt, then a terminal FAILED Result
naming the stage that raised. The handle never goes without a rollback
attempt, and the caller never sees the exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar

from resultcase.observability import get_logger

from ._callbacks import capture, ensure_result
from .builder import Builder
from .status import EXCEPTION, ORIGINAL_EXCEPTION

if TYPE_CHECKING:
    from .result import Result

H = TypeVar("H")
V = TypeVar("V")

_log = get_logger("resultcase.transaction")

BOUNDED_EXCEPTION = "Exception thrown in supplied transaction-bounded function"
FINAL_ROLLBACK_SUFFIX = ", and then again on the final rollback"


def stage_label(result: Result[V] | None) -> str:
    """Describe where a transaction failed given the bounded outcome (None if it raised)."""
    if result is None:
        return BOUNDED_EXCEPTION
    return f"Exception thrown when attempting to {'commit' if result.is_success() else 'rollback'} the transaction"


def run_transaction(
    handle: H,
    bounded: Callable[[], Result[V]],
    commit: Callable[[H], Result[bool]],
    rollback: Callable[[H], Result[bool]],
    is_new: Callable[[H], bool] | None = None,
) -> Result[V]:
    """Run ``bounded`` and commit or roll back ``handle`` according to its outcome."""
    result: Result[V] | None = None
    stage = "transaction.bounded"
    try:
        result = ensure_result(bounded(), stage)
        bounded_result = result

        stage = "transaction.is_new"
        if is_new is not None and not is_new(handle):
            return bounded_result

        stage, finalize = (("transaction.commit", commit) if bounded_result.is_success()
                           else ("transaction.rollback", rollback))
        return ensure_result(finalize(handle), stage).and_then(lambda _: bounded_result)
    except Exception as e:
        return _recover(result, handle, rollback, capture(stage, e).message)


def _recover(
    result: Result[V] | None,
    handle: H,
    rollback: Callable[[H], Result[bool]],
    exception: str,
) -> Result[V]:
    label = stage_label(result)
    _log.warning("rolling back after exception", stage=label, exception=exception)
    try:
        rolled_back = ensure_result(rollback(handle), "transaction.final_rollback")
    except Exception as e:
        second = capture("transaction.final_rollback", e).message
        _log.error("final rollback failed", stage=label, exception=second, original_exception=exception)
        return (
            Builder()
            .failed(label + FINAL_ROLLBACK_SUFFIX)
            .add_message(EXCEPTION, second)
            .add_message(ORIGINAL_EXCEPTION, exception)
            .build()
        )
    return rolled_back.and_then(lambda _: Builder().failed(label).add_message(EXCEPTION, exception).build())
