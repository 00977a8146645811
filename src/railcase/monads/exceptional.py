"""Exceptional: the boundary between raised exceptions and values.

try_catch runs a callable and turns an exception it raises into the Caught
state. That is the only place exceptions are caught: functions handed to
map/bind/tap/match must not raise, and nothing re-catches them.

Critical exceptions (see railcase.errors.critical) reaching the boundary
terminate the process instead of being captured.

Example:
    >>> try_catch(lambda: int("42"))
    Value(42)
    >>> try_catch(lambda: int("x"), ValueError).is_caught()
    True
    >>> try_catch(lambda: int("42")).map(lambda x: x + 1).to_result()
    Ok(43)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, TypeVar, cast

from railcase.errors import CRITICAL_EXCEPTIONS, fail_fast_if_critical, to_generic_error
from railcase.observability import get_logger

from .result import Result, ResultState

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

_log = get_logger("railcase.exceptional")


class Exceptional(Generic[T]):
    """Either a Value(T) or a Caught exception.

    Exceptional(value) builds the Value state; from_exception() / to_exceptional()
    build the Caught state.
    """

    __slots__ = ("_value", "_exception")
    __match_args__ = ("value", "exception")

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_exception", None)

    @classmethod
    def from_exception(cls, exception: Exception) -> Exceptional[T]:
        """Caught state holding exception."""
        if not isinstance(exception, BaseException):
            raise TypeError(f"from_exception() expects an exception, got {type(exception).__name__}")
        inst = cls.__new__(cls)
        object.__setattr__(inst, "_value", None)
        object.__setattr__(inst, "_exception", exception)
        return inst

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"Exceptional is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Exceptional is immutable; cannot delete {name!r}")

    # ─── State ─────────────────────────────────────────────────────────

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def exception(self) -> Exception | None:
        return self._exception

    def is_success(self) -> bool:
        return self._exception is None

    def is_caught(self) -> bool:
        return self._exception is not None

    def deconstruct(self) -> tuple[bool, T | None, Exception | None]:
        """(is_success, value, exception) triple."""
        return (self._exception is None, self._value, self._exception)

    def try_get(self) -> tuple[bool, T | None]:
        """(True, value) in the Value state, (False, None) when Caught.

        Example:
            >>> found, value = try_catch(lambda: 7).try_get()
            >>> found, value
            (True, 7)
        """
        if self._exception is None:
            return (True, self._value)
        return (False, None)

    # ─── Combinators ───────────────────────────────────────────────────
    # Callbacks passed below must not raise; a raise propagates to the caller.

    def map(self, f: Callable[[T], U]) -> Exceptional[U]:
        """Apply f to the value; a Caught exception passes through."""
        if self._exception is None:
            return Exceptional(f(cast(T, self._value)))
        return Exceptional.from_exception(self._exception)

    def bind(self, f: Callable[[T], Exceptional[U]]) -> Exceptional[U]:
        """Chain another Exceptional-producing step; skipped when Caught."""
        if self._exception is None:
            return f(cast(T, self._value))
        return Exceptional.from_exception(self._exception)

    def tap(self, value: Callable[[T], object], exception: Callable[[Exception], object]) -> Exceptional[T]:
        """Call exactly one observer, return self unchanged."""
        if self._exception is None:
            value(cast(T, self._value))
        else:
            exception(self._exception)
        return self

    def match(self, value: Callable[[T], R], exception: Callable[[Exception], R]) -> R:
        """Exactly one branch runs; its return value is returned."""
        if self._exception is None:
            return value(cast(T, self._value))
        return exception(self._exception)

    def to_result(self) -> Result[T]:
        """Value(v) -> Ok(v); Caught(ex) -> Failure(GenericError(ex))."""
        if self._exception is None:
            return Result(ResultState.OK, self._value)
        return Result(ResultState.FAILURE, error=to_generic_error(self._exception))

    # ─── Dunder Methods ────────────────────────────────────────────────

    def __bool__(self) -> bool:
        return self._exception is None

    def __repr__(self) -> str:
        if self._exception is None:
            return f"Value({self._value!r})"
        return f"Caught({self._exception!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Exceptional):
            return NotImplemented
        return self._exception == other._exception and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._exception is None, self._value, self._exception))


# ═════════════════════════════════════════════════════════════════════════════
# Constructors
# ═════════════════════════════════════════════════════════════════════════════


def success(value: T) -> Exceptional[T]:
    """Lift a value into the Value state."""
    return Exceptional(value)


def to_exceptional(exception: Exception) -> Exceptional[T]:
    """Wrap an exception in the Caught state."""
    return Exceptional.from_exception(exception)


# ═════════════════════════════════════════════════════════════════════════════
# Exception Boundary
# ═════════════════════════════════════════════════════════════════════════════


def _catalog(exc_types: tuple[type[Exception], ...]) -> tuple[type[Exception], ...]:
    """Validate the catalog and append the critical set; empty means every Exception."""
    for t in exc_types:
        if not (isinstance(t, type) and issubclass(t, Exception)):
            raise TypeError(f"try_catch catalog entries must be Exception subclasses, got {t!r}")
    return (*(exc_types or (Exception,)), *CRITICAL_EXCEPTIONS)


def _capture(exc: Exception, source: str) -> Exceptional[T]:
    fail_fast_if_critical(exc, source)
    _log.debug("exception captured", source=source, exc_type=type(exc).__name__)
    return Exceptional.from_exception(exc)


def try_catch(f: Callable[[], T], *exc_types: type[Exception]) -> Exceptional[T]:
    """Run f and capture a raised exception as Caught.

    Args:
        f: Zero-argument callable
        *exc_types: Exception types to capture. Empty captures any Exception;
            otherwise anything not listed propagates.

    Critical exceptions terminate the process whether listed or not.

    Example:
        >>> try_catch(lambda: {}["k"], KeyError)
        Caught(KeyError('k'))
        >>> try_catch(lambda: {}["k"], ValueError)
        Traceback (most recent call last):
        KeyError: 'k'
    """
    catalog = _catalog(exc_types)
    try:
        return Exceptional(f())
    except catalog as exc:
        return _capture(exc, "railcase.try_catch")


async def try_catch_async(f: Callable[[], Awaitable[T]], *exc_types: type[Exception]) -> Exceptional[T]:
    """try_catch for a coroutine function: awaits f() inside the boundary.

    Cancellation is a BaseException and is never captured.
    """
    catalog = _catalog(exc_types)
    try:
        return Exceptional(await f())
    except catalog as exc:
        return _capture(exc, "railcase.try_catch_async")
