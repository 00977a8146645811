"""Tests for Exceptional and the try_catch boundary."""

from __future__ import annotations

import asyncio
import json

import pytest
from conftest import ProcessTerminated

from railcase.errors import GenericError
from railcase.monads import Exceptional, failure, ok, success, to_exceptional, try_catch, try_catch_async


def _never(*_: object) -> object:
    raise AssertionError("should not be called")


def _raise(exc: BaseException) -> int:
    raise exc


# ═════════════════════════════════════════════════════════════════════════════
# Boundary
# ═════════════════════════════════════════════════════════════════════════════


def test_try_catch_value() -> None:
    assert try_catch(lambda: 42) == success(42)


def test_try_catch_captures_any_exception() -> None:
    exc = RuntimeError("boom")
    caught = try_catch(lambda: _raise(exc))

    assert caught.is_caught()
    assert caught.exception is exc


def test_try_catch_listed_type() -> None:
    exc = ValueError("bad argument")
    caught = try_catch(lambda: _raise(exc), ValueError)

    assert caught == to_exceptional(exc)


def test_try_catch_subclass_of_listed_type() -> None:
    caught = try_catch(lambda: _raise(KeyError("k")), LookupError)
    assert isinstance(caught.exception, KeyError)


def test_try_catch_unlisted_type_propagates() -> None:
    with pytest.raises(RuntimeError, match="not listed"):
        try_catch(lambda: _raise(RuntimeError("not listed")), ValueError)


@pytest.mark.parametrize("catalog", [(ValueError, TypeError), (ValueError, TypeError, KeyError)])
def test_try_catch_multiple_types(catalog: tuple[type[Exception], ...]) -> None:
    assert try_catch(lambda: _raise(TypeError("t")), *catalog).is_caught()
    with pytest.raises(ZeroDivisionError):
        try_catch(lambda: 1 // 0, *catalog)


def test_try_catch_rejects_non_exception_catalog() -> None:
    with pytest.raises(TypeError):
        try_catch(lambda: 1, KeyboardInterrupt)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        try_catch(lambda: 1, "ValueError")  # type: ignore[arg-type]


def test_base_exceptions_are_never_captured() -> None:
    with pytest.raises(KeyboardInterrupt):
        try_catch(lambda: _raise(KeyboardInterrupt()))


def test_try_catch_logs_capture(log_buffer) -> None:
    try_catch(lambda: _raise(ValueError("x")))

    entry = json.loads(log_buffer.getvalue().strip().splitlines()[-1])
    assert entry["event"] == "exception captured"
    assert entry["exc_type"] == "ValueError"


@pytest.mark.parametrize("critical", [MemoryError, RecursionError, SystemError])
def test_critical_exception_fails_fast(critical: type[Exception], terminations: list[ProcessTerminated]) -> None:
    with pytest.raises(ProcessTerminated):
        try_catch(lambda: _raise(critical()))
    assert len(terminations) == 1


@pytest.mark.parametrize("catalog", [(MemoryError,), (ValueError,), (Exception,)])
def test_critical_exception_fails_fast_whatever_the_catalog(
    catalog: tuple[type[Exception], ...],
    terminations: list[ProcessTerminated],
) -> None:
    with pytest.raises(ProcessTerminated):
        try_catch(lambda: _raise(MemoryError()), *catalog)
    assert [t.how for t in terminations] == ["abort"]


@pytest.mark.asyncio
async def test_try_catch_async() -> None:
    async def compute() -> int:
        await asyncio.sleep(0)
        return 7

    async def explode() -> int:
        await asyncio.sleep(0)
        raise ValueError("async boom")

    assert await try_catch_async(compute) == success(7)
    caught = await try_catch_async(explode, ValueError)
    assert isinstance(caught.exception, ValueError)

    with pytest.raises(ValueError):
        await try_catch_async(explode, KeyError)


@pytest.mark.asyncio
@pytest.mark.parametrize("critical", [MemoryError, RecursionError, SystemError])
@pytest.mark.parametrize("catalog", [(), (ValueError,), (Exception,)])
async def test_try_catch_async_critical_exception_fails_fast(
    critical: type[Exception],
    catalog: tuple[type[Exception], ...],
    terminations: list[ProcessTerminated],
) -> None:
    async def explode() -> int:
        await asyncio.sleep(0)
        raise critical()

    with pytest.raises(ProcessTerminated):
        await try_catch_async(explode, *catalog)
    assert [t.how for t in terminations] == ["abort"]


@pytest.mark.asyncio
async def test_try_catch_async_does_not_capture_cancellation() -> None:
    async def cancelled() -> int:
        raise asyncio.CancelledError

    with pytest.raises(asyncio.CancelledError):
        await try_catch_async(cancelled)


# ═════════════════════════════════════════════════════════════════════════════
# Combinators
# ═════════════════════════════════════════════════════════════════════════════


def test_map() -> None:
    assert success(2).map(lambda x: x * 10) == success(20)

    exc = ValueError()
    assert to_exceptional(exc).map(_never) == to_exceptional(exc)


def test_map_laws() -> None:
    f = lambda x: x + 1  # noqa: E731
    g = lambda x: x * 2  # noqa: E731
    assert success(3).map(lambda x: x) == success(3)
    assert success(3).map(f).map(g) == success(3).map(lambda x: g(f(x)))


def test_bind() -> None:
    assert success("4").bind(lambda s: try_catch(lambda: int(s))) == success(4)
    assert success("x").bind(lambda s: try_catch(lambda: int(s))).is_caught()

    exc = ValueError()
    assert to_exceptional(exc).bind(_never).exception is exc


def test_tap_returns_same_instance() -> None:
    seen: list[object] = []
    value = success(1)
    assert value.tap(seen.append, _never) is value

    exc = ValueError("e")
    caught = to_exceptional(exc)
    assert caught.tap(_never, seen.append) is caught
    assert seen == [1, exc]


def test_tap_callback_raise_propagates_and_leaves_value() -> None:
    value = success(1)
    with pytest.raises(ZeroDivisionError):
        value.tap(lambda x: x // 0, _never)
    assert value == success(1)


def test_match() -> None:
    assert success(5).match(lambda v: f"value {v}", _never) == "value 5"
    assert to_exceptional(KeyError("k")).match(_never, lambda e: type(e).__name__) == "KeyError"


def test_try_get() -> None:
    assert success(9).try_get() == (True, 9)
    assert to_exceptional(ValueError()).try_get() == (False, None)


def test_to_result() -> None:
    assert success(1).to_result() == ok(1)

    exc = ValueError("v")
    assert to_exceptional(exc).to_result() == failure(GenericError(exc))


def test_equality() -> None:
    exc = ValueError("same")
    assert success(1) == success(1)
    assert hash(success(1)) == hash(success(1))
    assert success(1) != success(2)
    assert to_exceptional(exc) == to_exceptional(exc)
    assert to_exceptional(exc) != to_exceptional(ValueError("same"))
    assert success(None) != to_exceptional(exc)


def test_deconstruct_and_pattern_matching() -> None:
    exc = ValueError()
    assert success(3).deconstruct() == (True, 3, None)
    assert to_exceptional(exc).deconstruct() == (False, None, exc)

    match success(3):
        case Exceptional(value, None):
            assert value == 3
        case _:
            pytest.fail("expected value state")


def test_immutable() -> None:
    with pytest.raises(AttributeError):
        success(1)._value = 2  # type: ignore[misc]


def test_repr() -> None:
    assert repr(success(1)) == "Value(1)"
    assert repr(to_exceptional(KeyError("k"))) == "Caught(KeyError('k'))"
