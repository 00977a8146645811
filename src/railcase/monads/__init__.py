"""Monadic error handling.

- Result/ok/failure: railway-oriented success/failure values
- Exceptional/try_catch: capture raised exceptions as values at one boundary
- AsyncResult and the *_async/*_await combinators: the same algebra over awaitables

Example:
    >>> from railcase.monads import GenericError, failure, ok
    >>>
    >>> def divide(a: int, b: int) -> Result[float]:
    ...     if b == 0:
    ...         return failure(GenericError("division by zero"))
    ...     return ok(a / b)
    >>>
    >>> divide(10, 2).map(lambda x: x * 2).bind(lambda x: ok(x + 1)).unwrap()
    11.0
"""

from railcase.errors import GenericError

from .exceptional import Exceptional, success, to_exceptional, try_catch, try_catch_async
from .result import (
    Result,
    ResultState,
    collect_results,
    failure,
    ok,
    sequence,
    to_result,
    traverse,
)
from .tasks import (
    AsyncResult,
    Shared,
    bind_async,
    bind_await,
    bind_failure_async,
    bind_failure_await,
    from_awaitable,
    map_async,
    map_await,
    map_failure_async,
    map_failure_await,
    match_async,
    match_await,
    tap_async,
    tap_await,
    to_task,
)

__all__ = [
    # Result
    "Result", "ResultState", "ok", "failure", "to_result", "GenericError",
    # Collection operations
    "sequence", "traverse", "collect_results",
    # Exceptional
    "Exceptional", "success", "to_exceptional", "try_catch", "try_catch_async",
    # Async layer
    "AsyncResult", "Shared", "to_task", "from_awaitable",
    "map_async", "map_await", "map_failure_async", "map_failure_await",
    "bind_async", "bind_await", "bind_failure_async", "bind_failure_await",
    "match_async", "match_await", "tap_async", "tap_await",
]
