"""Async combinators over awaitables that resolve to a Result.

Lets a pending Result be composed with continuations exactly as if it had
already resolved. Any awaitable works as the antecedent: a coroutine, an
asyncio Future or Task, or an AsyncResult. No scheduler is involved; every
combinator awaits the antecedent, inspects the tag, and runs at most one
continuation.

Each combinator has two entry points:
    *_await  - continuation returns an awaitable (the general form)
    *_async  - continuation returns its value directly (thin wrapper that
               lifts the value into an already-resolved awaitable)

    map_await / map_async                    OK channel
    bind_await / bind_async                  OK channel, flattening
    map_failure_await / map_failure_async    FAILURE channel
    bind_failure_await / bind_failure_async  FAILURE channel, may recover
    match_await / match_async                sink, resolves to branch value
    tap_await / tap_async                    observe, resolves to the antecedent

Every combinator returns a handle that settles once: the first await drives
the work, later awaits get the same value (or the same exception) back. A
pending handle can therefore be awaited again or branched into several
continuations.

Example:
    >>> async def main() -> str:
    ...     return await (
    ...         ok(1234)
    ...         .to_task()
    ...         .map_async(str)
    ...         .match_async(lambda s: s, lambda e: "error")
    ...     )
    >>> asyncio.run(main())
    '1234'

A fault or cancellation of the antecedent propagates out of the composed
handle unchanged; it never becomes a Failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar, cast

from railcase.errors import Error

from .result import Result, ResultState, failure as _failure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Generator

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

_OK = ResultState.OK
_FAILURE = ResultState.FAILURE


class _Ready(Generic[T]):
    """Already-resolved awaitable. Awaiting it never suspends and can be repeated."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    def __await__(self) -> Generator[None, None, T]:
        return self._value
        yield  # pragma: no cover - marks this as a generator


def _lift(f: Callable[..., T]) -> Callable[..., Awaitable[T]]:
    """Sync continuation -> continuation returning an already-resolved awaitable."""
    return lambda *args: _Ready(f(*args))


class Shared(Generic[T]):
    """Awaitable that drives its source once and remembers the outcome.

    The first await runs the source to completion; every later await returns
    the stored value or re-raises the stored exception without touching the
    source again. Two awaiters racing on an unsettled coroutine source is an
    error; share such a handle across tasks by wrapping it in a Task first.
    """

    __slots__ = ("_source", "_running", "_settled", "_value", "_fault")

    def __init__(self, source: Awaitable[T]) -> None:
        self._source = source
        self._running = False
        self._settled = False
        self._value: T | None = None
        self._fault: BaseException | None = None

    def __await__(self) -> Generator[object, None, T]:
        if not self._settled:
            if self._running:
                raise RuntimeError(f"{type(self).__name__} is already being awaited by another caller")
            self._running = True
            try:
                value = yield from self._source.__await__()
            except GeneratorExit:
                self._running = False
                raise
            except BaseException as exc:
                self._settle(None, exc)
                raise
            self._settle(value, None)
        if self._fault is not None:
            raise self._fault
        return cast(T, self._value)

    def _settle(self, value: T | None, fault: BaseException | None) -> None:
        self._value, self._fault = value, fault
        self._settled, self._running = True, False
        self._source = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self._settled:
            return f"{type(self).__name__}(<pending>)"
        outcome = self._fault if self._fault is not None else self._value
        return f"{type(self).__name__}({outcome!r})"


# ═════════════════════════════════════════════════════════════════════════════
# Continuations
# ═════════════════════════════════════════════════════════════════════════════


async def _map(antecedent: Awaitable[Result[T]], f: Callable[[T], Awaitable[U]]) -> Result[U]:
    result = await antecedent
    if result._guard("map_await") is _OK:
        return Result(_OK, await f(cast(T, result._ok)))
    return Result(_FAILURE, error=result._error)


async def _map_failure(antecedent: Awaitable[Result[T]], f: Callable[[Error], Awaitable[Error]]) -> Result[T]:
    result = await antecedent
    if result._guard("map_failure_await") is _FAILURE:
        return _failure(await f(cast(Error, result._error)))
    return result


async def _bind(antecedent: Awaitable[Result[T]], f: Callable[[T], Awaitable[Result[U]]]) -> Result[U]:
    result = await antecedent
    if result._guard("bind_await") is _OK:
        return await f(cast(T, result._ok))
    return Result(_FAILURE, error=result._error)


async def _bind_failure(antecedent: Awaitable[Result[T]], f: Callable[[Error], Awaitable[Result[T]]]) -> Result[T]:
    result = await antecedent
    if result._guard("bind_failure_await") is _FAILURE:
        return await f(cast(Error, result._error))
    return result


async def _match(
    antecedent: Awaitable[Result[T]],
    ok: Callable[[T], Awaitable[R]],
    failure: Callable[[Error], Awaitable[R]],
) -> R:
    result = await antecedent
    if result._guard("match_await") is _OK:
        return await ok(cast(T, result._ok))
    return await failure(cast(Error, result._error))


async def _tap(
    antecedent: Awaitable[Result[T]],
    ok: Callable[[T], Awaitable[object]],
    failure: Callable[[Error], Awaitable[object]],
) -> Result[T]:
    result = await antecedent
    if result._guard("tap_await") is _OK:
        await ok(cast(T, result._ok))
    else:
        await failure(cast(Error, result._error))
    return result


# ═════════════════════════════════════════════════════════════════════════════
# General Forms (continuation returns an awaitable)
# ═════════════════════════════════════════════════════════════════════════════


def map_await(antecedent: Awaitable[Result[T]], f: Callable[[T], Awaitable[U]]) -> AsyncResult[U]:
    """Ok(v) -> Ok(await f(v)); Failure passes through without calling f."""
    return AsyncResult(_map(antecedent, f))


def map_failure_await(antecedent: Awaitable[Result[T]], f: Callable[[Error], Awaitable[Error]]) -> AsyncResult[T]:
    """Failure(e) -> Failure(await f(e)); Ok resolves to the antecedent's Result.

    f must resolve to an Error; anything else raises TypeError.
    """
    return AsyncResult(_map_failure(antecedent, f))


def bind_await(antecedent: Awaitable[Result[T]], f: Callable[[T], Awaitable[Result[U]]]) -> AsyncResult[U]:
    """Ok(v) -> await f(v), flattened; Failure passes through without calling f."""
    return AsyncResult(_bind(antecedent, f))


def bind_failure_await(
    antecedent: Awaitable[Result[T]],
    f: Callable[[Error], Awaitable[Result[T]]],
) -> AsyncResult[T]:
    """Failure(e) -> await f(e), which may recover to Ok; Ok passes through."""
    return AsyncResult(_bind_failure(antecedent, f))


def match_await(
    antecedent: Awaitable[Result[T]],
    ok: Callable[[T], Awaitable[R]],
    failure: Callable[[Error], Awaitable[R]],
) -> Shared[R]:
    """Await the antecedent, run exactly one branch, resolve to its value."""
    return Shared(_match(antecedent, ok, failure))


def tap_await(
    antecedent: Awaitable[Result[T]],
    ok: Callable[[T], Awaitable[object]],
    failure: Callable[[Error], Awaitable[object]],
) -> AsyncResult[T]:
    """Run exactly one observer, ignore its value, resolve to the antecedent's Result."""
    return AsyncResult(_tap(antecedent, ok, failure))


# ═════════════════════════════════════════════════════════════════════════════
# Sync-Continuation Forms
# ═════════════════════════════════════════════════════════════════════════════


def map_async(antecedent: Awaitable[Result[T]], f: Callable[[T], U]) -> AsyncResult[U]:
    return map_await(antecedent, _lift(f))


def map_failure_async(antecedent: Awaitable[Result[T]], f: Callable[[Error], Error]) -> AsyncResult[T]:
    return map_failure_await(antecedent, _lift(f))


def bind_async(antecedent: Awaitable[Result[T]], f: Callable[[T], Result[U]]) -> AsyncResult[U]:
    return bind_await(antecedent, _lift(f))


def bind_failure_async(antecedent: Awaitable[Result[T]], f: Callable[[Error], Result[T]]) -> AsyncResult[T]:
    return bind_failure_await(antecedent, _lift(f))


def match_async(
    antecedent: Awaitable[Result[T]],
    ok: Callable[[T], R],
    failure: Callable[[Error], R],
) -> Shared[R]:
    return match_await(antecedent, _lift(ok), _lift(failure))


def tap_async(
    antecedent: Awaitable[Result[T]],
    ok: Callable[[T], object],
    failure: Callable[[Error], object],
) -> AsyncResult[T]:
    return tap_await(antecedent, _lift(ok), _lift(failure))


# ═════════════════════════════════════════════════════════════════════════════
# Fluent Wrapper
# ═════════════════════════════════════════════════════════════════════════════


class AsyncResult(Shared[Result[T]]):
    """Pending Result exposing the combinators fluently.

    Settles once, so it can be awaited repeatedly and several continuations
    can hang off the same instance; the antecedent still runs only once.

    Example:
        >>> async def fetch() -> Result[int]:
        ...     return ok(41)
        >>> pending = AsyncResult(fetch())
        >>> await pending.map_async(lambda x: x + 1)
        Ok(42)
        >>> await pending.map_async(str)
        Ok('41')
    """

    __slots__ = ()

    # ─── Sync continuations ──────────────────────────────────────────────

    def map_async(self, f: Callable[[T], U]) -> AsyncResult[U]:
        return map_async(self, f)

    def map_failure_async(self, f: Callable[[Error], Error]) -> AsyncResult[T]:
        return map_failure_async(self, f)

    def bind_async(self, f: Callable[[T], Result[U]]) -> AsyncResult[U]:
        return bind_async(self, f)

    def bind_failure_async(self, f: Callable[[Error], Result[T]]) -> AsyncResult[T]:
        return bind_failure_async(self, f)

    def tap_async(self, ok: Callable[[T], object], failure: Callable[[Error], object]) -> AsyncResult[T]:
        return tap_async(self, ok, failure)

    def match_async(self, ok: Callable[[T], R], failure: Callable[[Error], R]) -> Shared[R]:
        """Sink: resolves to the chosen branch's value, not a Result."""
        return match_async(self, ok, failure)

    # ─── Async continuations ─────────────────────────────────────────────

    def map_await(self, f: Callable[[T], Awaitable[U]]) -> AsyncResult[U]:
        return map_await(self, f)

    def map_failure_await(self, f: Callable[[Error], Awaitable[Error]]) -> AsyncResult[T]:
        return map_failure_await(self, f)

    def bind_await(self, f: Callable[[T], Awaitable[Result[U]]]) -> AsyncResult[U]:
        return bind_await(self, f)

    def bind_failure_await(self, f: Callable[[Error], Awaitable[Result[T]]]) -> AsyncResult[T]:
        return bind_failure_await(self, f)

    def tap_await(
        self,
        ok: Callable[[T], Awaitable[object]],
        failure: Callable[[Error], Awaitable[object]],
    ) -> AsyncResult[T]:
        return tap_await(self, ok, failure)

    def match_await(
        self,
        ok: Callable[[T], Awaitable[R]],
        failure: Callable[[Error], Awaitable[R]],
    ) -> Shared[R]:
        return match_await(self, ok, failure)


# ═════════════════════════════════════════════════════════════════════════════
# Lifting
# ═════════════════════════════════════════════════════════════════════════════


def to_task(result: Result[T]) -> AsyncResult[T]:
    """Lift a resolved Result into an AsyncResult. Never suspends when awaited."""
    return AsyncResult(_Ready(result))


def from_awaitable(awaitable: Awaitable[Result[T]]) -> AsyncResult[T]:
    """Wrap any awaitable of Result (coroutine, Future, Task) for fluent chaining."""
    return awaitable if isinstance(awaitable, AsyncResult) else AsyncResult(awaitable)
