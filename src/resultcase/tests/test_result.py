"""Tests for Result queries and transform operators.

Validates:
- Query surface (value, status, messages, is_success vs is_present)
- map / and_then short-circuiting and exception capture
- meets_condition branch selection for functions and suppliers
- filter, side-effect hooks, fallback extraction
"""

from __future__ import annotations

import copy
import pickle
from dataclasses import dataclass

import pytest

from resultcase import Result, Status, Variant, foreach


def success_a(value: str) -> Result[str]:
    return Result.builder().success(value).add_message("message", "success a1").build()


def success_b(value: float) -> Result[float]:
    return Result.builder().success(value).add_message("message", "success b1").build()


def failed_a(key: str, value: str) -> Result[str]:
    return Result.builder().failed("failed a").add_message(key, value).build()


def boom(*_: object) -> object:
    raise RuntimeError("boom")


# ═════════════════════════════════════════════════════════════════════════════
# Queries
# ═════════════════════════════════════════════════════════════════════════════


def test_presence() -> None:
    assert success_a("A").is_present()
    assert success_b(3.14159).is_present()
    assert not failed_a("message", "failed A").is_present()


def test_failures_have_no_value_and_an_error() -> None:
    for status in Status:
        if status is Status.SUCCESS:
            continue
        result = Result.builder().with_status(status).with_value(1).build()
        assert result.value() is None
        assert "error" in result.messages()
        assert result.is_failure()


def test_message_lookup() -> None:
    result = failed_a("id", "42")

    assert result.message("id") == "42"
    assert result.message("missing") is None


def test_satisfies() -> None:
    assert success_a("test value").satisfies(lambda v: v == "test value")
    assert not success_a("test value").satisfies(lambda v: v == "other")
    assert not failed_a("m", "x").satisfies(lambda v: True)


def test_truthiness_and_iteration() -> None:
    assert bool(success_a("x")) is True
    assert bool(failed_a("m", "x")) is False
    assert list(success_a("x")) == ["x"]
    assert list(failed_a("m", "x")) == []


def test_equality() -> None:
    assert success_a("x") == success_a("x")
    assert success_a("x") != success_a("y")
    assert failed_a("m", "x") != failed_a("m", "y")


# ═════════════════════════════════════════════════════════════════════════════
# map
# ═════════════════════════════════════════════════════════════════════════════


def test_map_keeps_messages() -> None:
    """Mapping replaces the value and carries the messages forward."""
    result = success_a("yippie").map(lambda _: 3.14159)

    assert result.value() == 3.14159
    assert result.messages() == success_a("anything").messages()


def test_map_on_failure_never_calls_function() -> None:
    calls: list[object] = []
    result = failed_a("message", "failed A").map(calls.append)

    assert calls == []
    assert not result.is_success()
    assert not result.is_present()
    assert result.messages() == failed_a("message", "failed A").messages()


def test_map_exception_keeps_original_status() -> None:
    """A raising map function drops the value but keeps the SUCCESS tag."""
    result = success_a("x").map(boom)

    assert result.status() is Status.SUCCESS
    assert not result.is_success()
    assert result.variant is Variant.EMPTY
    assert result.message("exception") == "boom"
    assert result.message("message") == "success a1"


def test_map_to_none_is_empty() -> None:
    result = success_a("x").map(lambda _: None)

    assert result.status() is Status.SUCCESS
    assert not result.is_present()


# ═════════════════════════════════════════════════════════════════════════════
# and_then
# ═════════════════════════════════════════════════════════════════════════════


def test_and_then_success_chain() -> None:
    assert success_a("A").and_then(lambda _: success_b(3.14159)).or_else(0) == 3.14159


def test_and_then_short_circuits_on_failure() -> None:
    calls: list[object] = []

    def step(value: str) -> Result[float]:
        calls.append(value)
        return success_b(1.0)

    result = failed_a("message", "failed a1").and_then(step)

    assert calls == []
    assert not result.is_present()
    assert result.status() is Status.FAILED
    assert result.messages() == failed_a("message", "failed a1").messages()


def test_and_then_returns_failed_step() -> None:
    result = success_a("A").and_then(lambda _: failed_a("message", "failed B"))

    assert not result.is_present()
    assert result.message("message") == "failed B"


def test_and_then_captures_exception() -> None:
    result = success_a("input").and_then(boom)

    assert result.status() is Status.FAILED
    assert result.message("error") == "Exception thrown in specified function"
    assert result.message("exception") == "boom"
    assert result.message("value") == "input"


def test_and_then_rejects_non_result_return() -> None:
    result = success_a("input").and_then(lambda v: v.upper())

    assert result.status() is Status.FAILED
    assert "expected Result" in str(result.message("exception"))


def test_and_then_accumulates_errors() -> None:
    result = Result.builder().success(100).build().and_then(
        lambda _: Result.builder()
        .failed("result 1 failed (1)")
        .add_message("error", "result 1 failed (2)")
        .build()
    )

    assert result.message("error") == "result 1 failed (2)"
    assert result.message("error_") == "result 1 failed (1)"


def test_and_then_with_failure_function() -> None:
    recovered = failed_a("m", "x").and_then(
        lambda _: success_b(1.0),
        lambda failure: Result.builder().success(float(len(failure.messages()))).build(),
    )
    assert recovered.value() == 3.0

    succeeded = success_a("x").and_then(lambda _: success_b(2.0), boom)
    assert succeeded.value() == 2.0


def test_and_then_failure_function_exception() -> None:
    result = failed_a("id", "7").and_then(lambda _: success_b(1.0), boom)

    assert result.status() is Status.FAILED
    assert result.message("exception") == "boom"
    assert result.message("id") == "7"
    # The original error keeps the base key; the boundary error shifts behind it
    assert result.message("error") == "failed a"
    assert result.message("error_") == "Exception thrown in function supplied to Result.and_then(success, failure)"


# ═════════════════════════════════════════════════════════════════════════════
# meets_condition
# ═════════════════════════════════════════════════════════════════════════════


def ten() -> Result[int]:
    return Result.builder().success(10).build()


def met(value: int) -> Result[str]:
    return Result.builder().success(f"met {value}").build()


def not_met(value: int) -> Result[str]:
    return Result.builder().success(f"not met {value}").build()


def met_supplier() -> Result[str]:
    return Result.builder().success("met").build()


def not_met_supplier() -> Result[str]:
    return Result.builder().success("not met").build()


@pytest.mark.parametrize(
    ("on_met", "on_not_met", "expect_met", "expect_not_met"),
    [
        (met, not_met, "met 10", "not met 10"),
        (met_supplier, not_met_supplier, "met", "not met"),
        (met, not_met_supplier, "met 10", "not met"),
        (met_supplier, not_met, "met", "not met 10"),
    ],
)
def test_meets_condition_branches(on_met, on_not_met, expect_met: str, expect_not_met: str) -> None:
    """Functions receive the value, suppliers are called without it."""
    assert ten().meets_condition(lambda v: v == 10, on_met, on_not_met).value() == expect_met
    assert ten().meets_condition(lambda v: v != 10, on_met, on_not_met).value() == expect_not_met


def test_meets_condition_short_circuits_on_failure() -> None:
    calls: list[str] = []
    failed = Result.builder().bad_request("bad id").add_message("id", -1).build()

    def predicate(value: object) -> bool:
        calls.append("predicate")
        return True

    result = failed.meets_condition(predicate, lambda v: calls.append("met"), lambda v: calls.append("not met"))

    assert calls == []
    assert result.status() is Status.BAD_REQUEST
    assert result.messages() == failed.messages()


def test_meets_condition_branch_exception() -> None:
    result = ten().meets_condition(lambda v: True, boom, not_met)

    assert result.status() is Status.FAILED
    assert not result.is_present()
    assert result.message("exception") == "boom"


def test_meets_condition_supplier_exception() -> None:
    def failing_supplier() -> Result[str]:
        raise ValueError("no supply")

    result = ten().meets_condition(lambda v: False, met, failing_supplier)

    assert result.status() is Status.FAILED
    assert result.message("error") == "Exception thrown in specified supplier"
    assert result.message("exception") == "no supply"


def test_meets_condition_predicate_exception() -> None:
    result = ten().meets_condition(boom, met, not_met)

    assert result.status() is Status.FAILED
    assert result.message("exception") == "boom"


# ═════════════════════════════════════════════════════════════════════════════
# filter & hooks
# ═════════════════════════════════════════════════════════════════════════════


def test_filter() -> None:
    assert success_a("test value").filter(lambda v: v == "test value").or_else("not passed") == "test value"
    assert success_a("test value").filter(lambda v: v == "nope").or_else("not passed") == "not passed"
    failed = failed_a("message", "failed A")
    assert failed.filter(lambda v: True) is failed


def test_filter_miss_keeps_status_and_messages() -> None:
    original = success_a("x")
    filtered = original.filter(lambda v: False)

    assert filtered.status() is Status.SUCCESS
    assert not filtered.is_success()
    assert filtered.messages() == original.messages()


def test_filter_hit_returns_self() -> None:
    original = success_a("x")
    assert original.filter(lambda v: True) is original


def test_on_success_and_if_success() -> None:
    seen: list[str] = []
    result = success_a("x")

    assert result.on_success(seen.append) is result
    result.if_success(seen.append)
    failed_a("m", "y").on_success(seen.append)
    failed_a("m", "y").if_success(seen.append)

    assert seen == ["x", "x"]


def test_on_success_consumer_exception() -> None:
    result = success_a("x").on_success(boom)

    assert result.status() is Status.FAILED
    assert result.message("exception") == "boom"


def test_if_present_skips_empty() -> None:
    seen: list[object] = []
    Result.builder().with_status(Status.SUCCESS).build().if_present(seen.append)
    success_a("x").if_present(seen.append)

    assert seen == ["x"]


def test_on_failure_supplier() -> None:
    result = failed_a("failed", "failed result").on_failure(
        lambda: Result.builder().failed("fail function called").build()
    )

    assert result.message("error") == "fail function called"


def test_on_failure_function_sees_result() -> None:
    result = failed_a("failed", "failed result").on_failure(
        lambda r: Result.builder().failed("fail function called").add_message("result", r.messages()).build()
    )

    assert result.message("result") == {"error": "failed a", "failed": "failed result", "status": Status.FAILED}


def test_on_failure_skipped_on_success() -> None:
    original = success_a("x")
    assert original.on_failure(boom) is original


def test_on_failure_exception() -> None:
    result = failed_a("id", "3").on_failure(boom)

    assert result.status() is Status.FAILED
    assert result.message("exception") == "boom"
    assert result.message("id") == "3"


def test_if_result_dispatches_once() -> None:
    seen: list[str] = []
    success_a("x").if_result(lambda v: seen.append(f"ok {v}"), lambda r: seen.append("failed"))
    failed_a("m", "y").if_result(lambda v: seen.append(f"ok {v}"), lambda r: seen.append(str(r.status())))

    assert seen == ["ok x", "FAILED"]


# ═════════════════════════════════════════════════════════════════════════════
# Value Extraction
# ═════════════════════════════════════════════════════════════════════════════


def test_or_else() -> None:
    assert success_a("success A").or_else("something else") == "success A"
    assert failed_a("message", "failed A").or_else("something else") == "something else"


def test_or_else_get_is_lazy() -> None:
    count = 0

    def supplier() -> str:
        nonlocal count
        count += 1
        return str(count)

    assert success_a("success A").or_else_get(supplier) == "success A"
    assert count == 0
    assert failed_a("message", "failed A").or_else_get(supplier) == "1"
    assert count == 1


def test_or_else_get_with_result_function() -> None:
    assert failed_a("id", "5").or_else_get(lambda r: f"missing {r.message('id')}") == "missing 5"


@pytest.mark.parametrize(("factory", "expected"), [(int, 0), (str, ""), (dict, {}), (list, [])])
def test_or_else_get_with_builtin_class(factory: type, expected: object) -> None:
    """Classes that need no argument are called bare, not handed the Result."""
    assert failed_a("id", "5").or_else_get(factory) == expected


@dataclass
class Missing:
    result: Result[str]


def test_or_else_get_with_class_requiring_result() -> None:
    fallback = failed_a("id", "5").or_else_get(Missing)

    assert isinstance(fallback, Missing)
    assert fallback.result.message("id") == "5"


def test_or_else_throw() -> None:
    assert success_a("x").or_else_throw(lambda: LookupError("unused")) == "x"

    with pytest.raises(LookupError, match="failed a"):
        failed_a("m", "y").or_else_throw(lambda r: LookupError(r.message("error")))

    with pytest.raises(RuntimeError):
        failed_a("m", "y").or_else_throw(RuntimeError)


# ═════════════════════════════════════════════════════════════════════════════
# attempt
# ═════════════════════════════════════════════════════════════════════════════


def test_attempt() -> None:
    assert Result.attempt(int, "42").value() == 42

    bad = Result.attempt(int, "forty-two")
    assert bad.status() is Status.BAD_REQUEST
    assert "invalid literal" in str(bad.message("exception"))

    missing = Result.attempt({}.__getitem__, "k")
    assert missing.status() is Status.NOT_FOUND


# ═════════════════════════════════════════════════════════════════════════════
# Copying & Pickling
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("duplicate", [copy.copy, copy.deepcopy, lambda r: pickle.loads(pickle.dumps(r))])
def test_results_survive_copy_and_pickle(duplicate) -> None:
    for original in (success_a("x"), failed_a("id", "7"), Result.builder().with_status(Status.SUCCESS).build()):
        restored = duplicate(original)

        assert restored == original
        assert restored.status() is original.status()
        assert restored.variant is original.variant
        with pytest.raises(TypeError):
            restored.messages()["error"] = "changed"  # type: ignore[index]


def test_pickled_batch_failure_keeps_nested_messages() -> None:
    original = foreach([1, 2], lambda v: failed_a("input", str(v)))

    restored = pickle.loads(pickle.dumps(original))

    assert restored == original
    assert restored.message("2")["input"] == "2"
    assert restored.message("error") == "Failed to process 2 of 2 inputs"
