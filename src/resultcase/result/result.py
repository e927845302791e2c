"""Immutable outcome record with a transformation algebra.

A Result carries an optional value, a Status and an ordered mapping of
messages. Failures are data: operators never raise to the caller, they return
a new Result. Exceptions raised inside user callbacks are converted to FAILED
Results carrying an ``exception`` message.

Three states are representable (see Variant):
- VALUE: SUCCESS with a value
- EMPTY: SUCCESS without a value, e.g. after a map whose function raised
- FAILURE: any other status; never has a value, always has ``error``

Example:
    >>> from resultcase import Result
    >>> def find_user(user_id: int) -> Result[str]:
    ...     if user_id == 1:
    ...         return Result.builder().success("ada").build()
    ...     return Result.builder().not_found("no such user").add_message("user_id", user_id).build()
    >>>
    >>> find_user(1).map(str.upper).or_else("anonymous")
    'ADA'
    >>> find_user(2).map(str.upper).message("error")
    'no such user'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Generic, NoReturn, TypeVar

from ._callbacks import call_adapted, call_branch, call_result_function, capture, ensure_result
from .batch import foreach_value
from .builder import Builder
from .messages import freeze, thaw
from .status import EXCEPTION, Status, Variant
from .transaction import run_transaction

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")
R = TypeVar("R")
E = TypeVar("E")


class Result(Generic[T]):
    """Outcome of an operation: status, optional value and ordered messages.

    Create instances with ``Result.builder()``; there is no public constructor.
    Instances are immutable and safe to share between threads.
    """

    __slots__ = ("_value", "_status", "_messages", "_variant")

    def __init__(self, *_: object, **__: object) -> None:
        raise TypeError("Result has no public constructor; use Result.builder()")

    @classmethod
    def _create(cls, value: T | None, status: Status, messages: dict[str, object]) -> Result[T]:
        """Internal constructor used by Builder.build() after validation."""
        self = object.__new__(cls)
        if status is not Status.SUCCESS:
            variant = Variant.FAILURE
        else:
            variant = Variant.EMPTY if value is None else Variant.VALUE
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_status", status)
        object.__setattr__(self, "_messages", freeze(messages))
        object.__setattr__(self, "_variant", variant)
        return self

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise AttributeError(f"Result is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError(f"Result is immutable; cannot delete {name!r}")

    @staticmethod
    def builder() -> Builder[Any]:
        """Start building a Result."""
        return Builder()

    @staticmethod
    def attempt(fn: Callable[..., R], *args: Any, **kwargs: Any) -> Result[R]:
        """Call a plain function at a failure origin.

        Returns SUCCESS with its return value, or a failure whose status is
        classified from the raised exception (see classify_exception).

        Example:
            >>> Result.attempt(int, "42").value()
            42
            >>> Result.attempt(int, "forty-two").status()
            <Status.BAD_REQUEST: 'BAD_REQUEST'>
        """
        try:
            value = fn(*args, **kwargs)
        except Exception as e:
            return Builder().from_exception(e).build()
        return Builder().success(value).build()

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    def value(self) -> T | None:
        """The value, or None when absent."""
        return self._value

    def status(self) -> Status:
        return self._status

    def messages(self) -> Mapping[str, object]:
        """All messages, including ``status``, as a read-only ordered mapping."""
        return self._messages

    def message(self, key: str) -> object | None:
        return self._messages.get(key)

    @property
    def variant(self) -> Variant:
        return self._variant

    def is_present(self) -> bool:
        return self._value is not None

    def is_success(self) -> bool:
        """SUCCESS status and a value present.

        A SUCCESS-tagged Result can fail this check when a map step dropped
        the value; use is_success() rather than status() to detect that.
        """
        return self._variant is Variant.VALUE

    def is_failure(self) -> bool:
        """Status other than SUCCESS."""
        return self._variant is Variant.FAILURE

    def satisfies(self, predicate: Callable[[T], bool]) -> bool:
        """Value present and ``predicate`` holds on it."""
        return self._value is not None and bool(predicate(self._value))

    # ─────────────────────────────────────────────────────────────────
    # Transformations
    # ─────────────────────────────────────────────────────────────────

    def map(self, function: Callable[[T], R]) -> Result[R]:
        """Transform the value.

        Without a value, returns a copy with the same status and messages. If
        ``function`` raises, the original status and messages are kept, an
        ``exception`` message is added and the value is absent: status() may
        still read SUCCESS while is_success() is False.
        """
        if self._value is None:
            return self._propagate()
        try:
            mapped = function(self._value)
        except Exception as e:
            return (
                Builder()
                .with_status(self._status)
                .add_messages(self._messages)
                .add_message(EXCEPTION, capture("map", e).message)
                .build()
            )
        return Builder().success(mapped).add_messages(self._messages).build()

    def and_then(
        self,
        function: Callable[[T], Result[R]],
        on_failure: Callable[[Result[T]], Result[R]] | None = None,
    ) -> Result[R]:
        """Chain a Result-returning step (monadic bind).

        ``function`` is only called with a present value; otherwise this
        status and messages are carried forward. If it raises, the result is
        FAILED with ``exception`` and ``value`` (the input) messages.

        With ``on_failure``, a non-SUCCESS Result is handed to it instead of
        being carried forward.
        """
        if on_failure is not None and self._status is not Status.SUCCESS:
            try:
                return ensure_result(on_failure(self), "and_then.on_failure")
            except Exception as e:
                return self._captured(
                    "and_then.on_failure", e,
                    "Exception thrown in function supplied to Result.and_then(success, failure)",
                )
        if self._value is None:
            return self._propagate()
        return call_result_function(function, self._value, "and_then")

    def meets_condition(
        self,
        predicate: Callable[[T], bool],
        on_met: Callable[[T], Result[R]] | Callable[[], Result[R]],
        on_not_met: Callable[[T], Result[R]] | Callable[[], Result[R]],
    ) -> Result[R]:
        """Branch on ``predicate(value)``.

        Each branch is either a function of the value or a zero-argument
        supplier. Nothing is evaluated unless status is SUCCESS; otherwise
        this status and messages are carried forward.
        """
        if self._status is not Status.SUCCESS:
            return self._propagate()
        try:
            met = predicate(self._value)  # type: ignore[arg-type]
        except Exception as e:
            return self._captured(
                "meets_condition.predicate", e,
                "Exception thrown in predicate supplied to Result.meets_condition(...)",
            )
        return call_branch(on_met if met else on_not_met, self._value, "meets_condition")

    def filter(self, predicate: Callable[[T], bool]) -> Result[T]:
        """Keep the value only if ``predicate`` holds. Status is never changed by a failed test."""
        if self._value is None:
            return self
        try:
            keep = predicate(self._value)
        except Exception as e:
            return self._captured("filter", e, "Exception thrown in predicate supplied to Result.filter(...)")
        if keep:
            return self
        return Builder().with_status(self._status).add_messages(self._messages).build()

    def foreach(
        self,
        function: Callable[[E], Result[R]],
        element_type: type[E] | None = None,
        *,
        fail_fast: bool = False,
    ) -> Result[list[R]]:
        """Apply ``function`` to each element of the value (a list/tuple) or to the value itself.

        See resultcase.result.batch for exhaustive and fail-fast semantics.
        """
        if self._value is None:
            return self._propagate()
        return foreach_value(self._value, function, element_type, fail_fast=fail_fast)

    def transaction(
        self,
        bounded: Callable[[], Result[R]],
        commit: Callable[[T], Result[bool]],
        rollback: Callable[[T], Result[bool]],
        *,
        is_new: Callable[[T], bool] | None = None,
    ) -> Result[R]:
        """Run ``bounded`` inside the transaction held as this Result's value.

        Commits on success and rolls back on failure. With ``is_new``, only a
        handle for which it holds is committed or rolled back; a joined
        transaction is left to its owner. See resultcase.result.transaction.

        Example:
            >>> tx_result.transaction(
            ...     lambda: repo.save(order),
            ...     lambda tx: tx.commit(),
            ...     lambda tx: tx.rollback(),
            ...     is_new=lambda tx: tx.is_new,
            ... )
        """
        if self._value is None:
            return self._propagate()
        return run_transaction(self._value, bounded, commit, rollback, is_new)

    # ─────────────────────────────────────────────────────────────────
    # Side Effects & Recovery
    # ─────────────────────────────────────────────────────────────────

    def on_success(self, consumer: Callable[[T], object]) -> Result[T]:
        """Call ``consumer`` with the value when is_success(); returns self for chaining."""
        if self.is_success():
            try:
                consumer(self._value)  # type: ignore[arg-type]
            except Exception as e:
                return self._captured("on_success", e, "Exception thrown in consumer supplied to Result.on_success(...)")
        return self

    def if_success(self, consumer: Callable[[T], object]) -> None:
        if self.is_success():
            consumer(self._value)  # type: ignore[arg-type]

    def if_present(self, consumer: Callable[[T], object]) -> None:
        if self._value is not None:
            consumer(self._value)

    def on_failure(self, handler: Callable[[], Result[T]] | Callable[[Result[T]], Result[T]]) -> Result[T]:
        """Replace a non-SUCCESS Result.

        ``handler`` is a supplier, or a function receiving this Result so it
        can inspect the messages before producing the replacement.
        """
        if self._status is Status.SUCCESS:
            return self
        try:
            return ensure_result(call_adapted(handler, self), "on_failure")
        except Exception as e:
            return self._captured(
                "on_failure", e, "Exception thrown in specified failure function in Result.on_failure(...)",
            )

    def if_result(self, on_success: Callable[[T], object], on_failure: Callable[[Result[T]], object]) -> None:
        """Call exactly one of the consumers, dispatching on is_success()."""
        if self.is_success():
            on_success(self._value)  # type: ignore[arg-type]
        else:
            on_failure(self)

    # ─────────────────────────────────────────────────────────────────
    # Value Extraction
    # ─────────────────────────────────────────────────────────────────

    def or_else(self, default: T) -> T:
        """Value if present, else ``default`` (already evaluated by the caller)."""
        return self._value if self._value is not None else default

    def or_else_get(self, fallback: Callable[[], T] | Callable[[Result[T]], T]) -> T:
        """Value if present, else the fallback's output; it may take this Result as argument."""
        if self._value is not None:
            return self._value
        return call_adapted(fallback, self)

    def or_else_throw(
        self, exception: Callable[[], BaseException] | Callable[[Result[T]], BaseException],
    ) -> T:
        """Value if present, else raise the exception produced by the factory.

        The one operator that raises on purpose, for boundary code that must fail hard.

        Example:
            >>> result.or_else_throw(lambda r: LookupError(r.message("error")))
        """
        if self._value is not None:
            return self._value
        raise call_adapted(exception, self)

    # ─────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────

    def _propagate(self) -> Result[Any]:
        """Valueless copy carrying this status and messages."""
        return Builder().with_status(self._status).add_messages(self._messages).build()

    def _captured(self, stage: str, exc: Exception, error: str) -> Result[Any]:
        """FAILED Result describing ``exc``, with this Result's messages appended."""
        return (
            Builder()
            .failed(error)
            .add_message(EXCEPTION, capture(stage, exc).message)
            .add_messages(self._messages)
            .build()
        )

    # ─────────────────────────────────────────────────────────────────
    # Dunder Methods
    # ─────────────────────────────────────────────────────────────────

    def __bool__(self) -> bool:
        """Truthiness is is_success()."""
        return self.is_success()

    def __iter__(self) -> Iterator[T]:
        """Yield the value if present (0 or 1 elements)."""
        if self._value is not None:
            yield self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (self._status is other._status and self._value == other._value
                and dict(self._messages) == dict(other._messages))

    __hash__ = None  # type: ignore[assignment]

    def __reduce__(self) -> tuple[Callable[..., Result[T]], tuple[object, ...]]:
        """Rebuild through _create; copy, deepcopy and pickle would otherwise hit __setattr__.

        Nested message mappings (batch failures) come back as plain dicts.
        """
        return _restore, (self._value, self._status, thaw(self._messages))

    def __repr__(self) -> str:
        return f"Result({self._status}, value={self._value!r}, messages={dict(self._messages)!r})"


def _restore(value: T | None, status: Status, messages: dict[str, object]) -> Result[T]:
    return Result._create(value, status, messages)
