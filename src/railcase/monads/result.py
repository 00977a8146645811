"""Result monad for type-safe error handling.

Implements a discriminated union over ResultState with full monadic operations:
- Functor: map, map_failure
- Monad: bind (>>=), bind_failure
- Elimination: match, tap, deconstruct
- Railway-oriented composition

The error channel is fixed to railcase.errors.Error; only the success type varies.
"""

from __future__ import annotations

from enum import IntEnum
from typing import (
    TYPE_CHECKING,
    Callable,
    Generic,
    TypeVar,
    cast,
)

from railcase.errors import AggregateError, Error, InvalidResultStateError, UnreachableStateError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .tasks import AsyncResult

# Type variables for generic Result
T = TypeVar("T")  # Success type
U = TypeVar("U")  # Mapped success type
R = TypeVar("R")  # Match output type


class ResultState(IntEnum):
    """Tag of a Result. INVALID is what a default-constructed Result() carries."""

    INVALID = 0
    OK = 1
    FAILURE = 2


class Result(Generic[T]):
    """Discriminated union representing success (OK) or failure (FAILURE).

    Build with ok() / failure() / to_result(). Result() with no arguments yields
    the INVALID state; every combinator raises InvalidResultStateError on it.

    Examples:
        >>> ok(42).map(lambda x: x * 2)
        Ok(84)

        >>> failure(GenericError("failed")).map(lambda x: x * 2)
        Failure(GenericError(value='failed'))

        Railway-oriented programming:
        >>> def validate_positive(x: int) -> Result[int]:
        ...     return ok(x) if x > 0 else failure(GenericError("must be positive"))
        >>>
        >>> ok(5).bind(validate_positive).map(lambda x: x * 2)
        Ok(10)

        Structural pattern matching:
        >>> match ok(3):
        ...     case Result(ResultState.OK, value, None):
        ...         print(value)
        3

    Notes:
        - Uses __slots__ and refuses attribute assignment after construction
        - All operations return new Results (or self when nothing changes)
    """

    __slots__ = ("_state", "_ok", "_error")
    __match_args__ = ("state", "ok_value", "error")

    def __init__(
        self,
        state: ResultState = ResultState.INVALID,
        ok: T | None = None,
        error: Error | None = None,
    ) -> None:
        """Private constructor. Use ok(), failure() or to_result() instead."""
        object.__setattr__(self, "_state", state)
        object.__setattr__(self, "_ok", ok)
        object.__setattr__(self, "_error", error)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"Result is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Result is immutable; cannot delete {name!r}")

    @classmethod
    def of(cls, value: T | Error) -> Result[T]:
        """Implicit-conversion equivalent: Error -> Failure, anything else -> Ok."""
        return to_result(value)

    # ─────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────

    @property
    def state(self) -> ResultState:
        return self._state

    @property
    def ok_value(self) -> T | None:
        """Success value, or None unless OK."""
        return self._ok

    @property
    def error(self) -> Error | None:
        """Failure payload, or None unless FAILURE."""
        return self._error

    def is_ok(self) -> bool:
        return self._state == ResultState.OK

    def is_failure(self) -> bool:
        return self._state == ResultState.FAILURE

    def deconstruct(self) -> tuple[ResultState, T | None, Error | None]:
        """(state, ok value, error) triple for callers that branch by hand."""
        return (self._state, self._ok, self._error)

    def _guard(self, operation: str) -> ResultState:
        """Return the tag, raising for INVALID or unknown tags."""
        match self._state:
            case ResultState.OK: return ResultState.OK
            case ResultState.FAILURE: return ResultState.FAILURE
            case ResultState.INVALID: raise InvalidResultStateError(operation)
            case state: raise UnreachableStateError(state)

    # ─────────────────────────────────────────────────────────────────
    # Value Extraction
    # ─────────────────────────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract OK value.

        Raises:
            RuntimeError: If Result is a Failure
        """
        if self._guard("unwrap") is ResultState.OK:
            return cast(T, self._ok)
        raise RuntimeError(f"Called unwrap() on Failure value: {self._error}")

    def unwrap_failure(self) -> Error:
        """Extract the Error.

        Raises:
            RuntimeError: If Result is OK
        """
        if self._guard("unwrap_failure") is ResultState.FAILURE:
            return cast(Error, self._error)
        raise RuntimeError(f"Called unwrap_failure() on Ok value: {self._ok!r}")

    def unwrap_or(self, default: T) -> T:
        """Extract OK value or return default."""
        return cast(T, self._ok) if self._guard("unwrap_or") is ResultState.OK else default

    # ─────────────────────────────────────────────────────────────────
    # Functor Operations
    # ─────────────────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Map function over OK value (Functor).

        Applies f only if OK; a Failure keeps the same Error, re-typed.

        Type signature: Result[T] -> (T -> U) -> Result[U]
        """
        if self._guard("map") is ResultState.OK:
            return Result(ResultState.OK, f(cast(T, self._ok)))
        return Result(ResultState.FAILURE, error=self._error)

    def map_failure(self, f: Callable[[Error], Error]) -> Result[T]:
        """Map function over the Error. OK passes through as self.

        Type signature: Result[T] -> (Error -> Error) -> Result[T]
        """
        if self._guard("map_failure") is ResultState.FAILURE:
            return failure(f(cast(Error, self._error)))
        return self

    # ─────────────────────────────────────────────────────────────────
    # Monad Operations
    # ─────────────────────────────────────────────────────────────────

    def bind(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Monadic bind (>>=) - chain operations that can fail.

        f is never called on a Failure (short-circuit).

        Type signature: Result[T] -> (T -> Result[U]) -> Result[U]

        Example:
            >>> def parse_int(s: str) -> Result[int]:
            ...     return ok(int(s)) if s.isdigit() else failure(GenericError(f"invalid int: {s}"))
            >>>
            >>> ok("42").bind(parse_int).unwrap()
            42
        """
        if self._guard("bind") is ResultState.OK:
            return f(cast(T, self._ok))
        return Result(ResultState.FAILURE, error=self._error)

    def bind_failure(self, f: Callable[[Error], Result[T]]) -> Result[T]:
        """Recover from a Failure. f may return OK. OK passes through as self.

        Type signature: Result[T] -> (Error -> Result[T]) -> Result[T]
        """
        if self._guard("bind_failure") is ResultState.FAILURE:
            return f(cast(Error, self._error))
        return self

    # ─────────────────────────────────────────────────────────────────
    # Elimination
    # ─────────────────────────────────────────────────────────────────

    def match(
        self,
        ok: Callable[[T], R],
        failure: Callable[[Error], R],
    ) -> R:
        """Exhaustive case analysis. Exactly one branch runs.

        Example:
            >>> ok(42).match(ok=lambda x: f"success: {x}", failure=lambda e: f"failed: {e}")
            'success: 42'
        """
        if self._guard("match") is ResultState.OK:
            return ok(cast(T, self._ok))
        return failure(cast(Error, self._error))

    def tap(
        self,
        ok: Callable[[T], object],
        failure: Callable[[Error], object],
    ) -> Result[T]:
        """Call exactly one observer for side effects, return self."""
        if self._guard("tap") is ResultState.OK:
            ok(cast(T, self._ok))
        else:
            failure(cast(Error, self._error))
        return self

    # ─────────────────────────────────────────────────────────────────
    # Conversion
    # ─────────────────────────────────────────────────────────────────

    def to_task(self) -> AsyncResult[T]:
        """Lift into the async layer as an already-resolved AsyncResult."""
        from .tasks import to_task
        return to_task(self)

    # ─────────────────────────────────────────────────────────────────
    # Dunder Methods
    # ─────────────────────────────────────────────────────────────────

    def __bool__(self) -> bool:
        """True if OK."""
        return self._guard("__bool__") is ResultState.OK

    def __repr__(self) -> str:
        match self._state:
            case ResultState.OK: return f"Ok({self._ok!r})"
            case ResultState.FAILURE: return f"Failure({self._error!r})"
            case _: return "Result(<invalid>)"

    def __eq__(self, other: object) -> bool:
        """Structural equality: tag, then payload."""
        if not isinstance(other, Result):
            return NotImplemented
        return self._state == other._state and self._ok == other._ok and self._error == other._error

    def __hash__(self) -> int:
        return hash((int(self._state), self._ok, self._error))

    def __iter__(self) -> Iterator[T]:
        """Yields the OK value, or nothing on Failure."""
        if self._guard("__iter__") is ResultState.OK:
            yield cast(T, self._ok)


# ═════════════════════════════════════════════════════════════════════════════
# Constructor Functions
# ═════════════════════════════════════════════════════════════════════════════


def ok(value: T) -> Result[T]:
    """Construct OK variant (success).

    Type signature: T -> Result[T]
    """
    return Result(ResultState.OK, value)


def failure(error: Error) -> Result[T]:
    """Construct FAILURE variant.

    Type signature: Error -> Result[T]
    """
    if not isinstance(error, Error):
        raise TypeError(f"failure() expects an Error, got {type(error).__name__}")
    return Result(ResultState.FAILURE, error=error)


def to_result(value: T | Error) -> Result[T]:
    """Error -> Failure, any other value -> OK."""
    return failure(value) if isinstance(value, Error) else ok(value)


# ═════════════════════════════════════════════════════════════════════════════
# Collection Operations
# ═════════════════════════════════════════════════════════════════════════════


def sequence(results: Iterable[Result[T]]) -> Result[list[T]]:
    """Convert Results into a Result of list. Fails fast on first Failure.

    Example:
        >>> sequence([ok(1), ok(2), ok(3)])
        Ok([1, 2, 3])
    """
    values: list[T] = []
    for r in results:
        if r._guard("sequence") is ResultState.FAILURE:
            return Result(ResultState.FAILURE, error=r._error)
        values.append(cast(T, r._ok))
    return Result(ResultState.OK, values)


def traverse(items: Iterable[T], f: Callable[[T], Result[U]]) -> Result[list[U]]:
    """Map f over items and sequence. Stops calling f after the first Failure."""
    values: list[U] = []
    for item in items:
        r = f(item)
        if r._guard("traverse") is ResultState.FAILURE:
            return Result(ResultState.FAILURE, error=r._error)
        values.append(cast(U, r._ok))
    return Result(ResultState.OK, values)


def collect_results(results: Iterable[Result[T]]) -> Result[list[T]]:
    """Collect all Results, accumulating every Error into one AggregateError.

    Example:
        >>> collect_results([ok(1), failure(GenericError("e1")), failure(GenericError("e2"))]).error
        AggregateError(errors=(GenericError(value='e1'), GenericError(value='e2')))
    """
    values: list[T] = []
    errors: list[Error] = []
    for r in results:
        if r._guard("collect_results") is ResultState.OK:
            values.append(cast(T, r._ok))
        else:
            errors.append(cast(Error, r._error))
    return Result(ResultState.OK, values) if not errors else Result(ResultState.FAILURE, error=AggregateError.of(errors))
