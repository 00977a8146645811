"""Error taxonomy for the Result monad.

Errors are data, not exceptions:
- Error: abstract base, immutable and structurally compared
- GenericError: wraps an arbitrary payload (including caught exceptions)
- AggregateError: several errors accumulated into one

Programming errors (misuse of a Result) are raised as exceptions instead and
never travel through the failure channel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from railcase.monads.result import Result

V = TypeVar("V")
T = TypeVar("T")


# ═══════════════════════════════════════════════════════════════════════════════
# Error Values
# ═══════════════════════════════════════════════════════════════════════════════


class Error(ABC):
    """Base of the failure payload family. Use GenericError or AggregateError."""

    __slots__ = ()

    @property
    @abstractmethod
    def message(self) -> str:
        """Short human-readable rendering."""

    def to_result(self) -> Result[T]:
        """Failure shortcut: Error -> Result in Failure state."""
        from railcase.monads.result import failure
        return failure(self)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class GenericError(Error, Generic[V]):
    """Generic error carrying any payload.

    Example:
        >>> GenericError(1234).value
        1234
        >>> GenericError("boom") == GenericError("boom")
        True
    """

    value: V

    @property
    def message(self) -> str:
        v = self.value
        return f"{type(v).__name__}: {v}" if isinstance(v, BaseException) else str(v)


@dataclass(frozen=True, slots=True)
class AggregateError(Error):
    """Several errors collected without failing fast."""

    errors: tuple[Error, ...]

    @classmethod
    def of(cls, errors: Iterable[Error]) -> AggregateError:
        return cls(tuple(errors))

    @property
    def message(self) -> str:
        return f"{len(self.errors)} errors: " + "; ".join(e.message for e in self.errors)

    def __len__(self) -> int:
        return len(self.errors)


def to_generic_error(value: V) -> GenericError[V]:
    """Wrap any value (typically an exception) in a GenericError."""
    return GenericError(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Programming Errors
# ═══════════════════════════════════════════════════════════════════════════════


class InvalidResultStateError(RuntimeError):
    """Raised when a combinator is invoked on a default-constructed (INVALID) Result."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}() called on a Result in INVALID state; build it with ok() or failure()")


class UnreachableStateError(AssertionError):
    """Raised when a Result carries a tag outside ResultState."""

    def __init__(self, state: object) -> None:
        self.state = state
        super().__init__(f"unreachable Result state: {state!r}")
