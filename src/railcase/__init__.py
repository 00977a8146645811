"""railcase - Result, Error and Exceptional with a sync/async combinator algebra.

Quick Start:
    >>> from railcase import GenericError, failure, ok, try_catch
    >>>
    >>> ok(5).map(lambda x: x * 2).bind(lambda x: ok(x + 1))
    Ok(11)
    >>> failure(GenericError("boom")).map(lambda x: x * 2)
    Failure(GenericError(value='boom'))

Exception boundary:
    >>> try_catch(lambda: int("x"), ValueError).to_result().is_failure()
    True

Async composition:
    >>> await ok(1234).to_task().map_async(str).match_async(lambda s: s, lambda e: "error")
    '1234'
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .errors import (
    AggregateError,
    Error,
    GenericError,
    InvalidResultStateError,
    UnreachableStateError,
    fail_fast,
    is_critical,
    to_generic_error,
)

# Configuration & logging
from .foundation.config import get_settings
from .observability import configure_logging, get_logger

# Monads
from .monads import (
    AsyncResult,
    Exceptional,
    Result,
    ResultState,
    Shared,
    bind_async,
    bind_await,
    bind_failure_async,
    bind_failure_await,
    collect_results,
    failure,
    from_awaitable,
    map_async,
    map_await,
    map_failure_async,
    map_failure_await,
    match_async,
    match_await,
    ok,
    sequence,
    success,
    tap_async,
    tap_await,
    to_exceptional,
    to_result,
    to_task,
    traverse,
    try_catch,
    try_catch_async,
)

__all__ = [
    "__version__",
    # Errors
    "Error", "GenericError", "AggregateError", "to_generic_error",
    "InvalidResultStateError", "UnreachableStateError", "is_critical", "fail_fast",
    # Result
    "Result", "ResultState", "ok", "failure", "to_result", "sequence", "traverse", "collect_results",
    # Exceptional
    "Exceptional", "success", "to_exceptional", "try_catch", "try_catch_async",
    # Async layer
    "AsyncResult", "Shared", "to_task", "from_awaitable",
    "map_async", "map_await", "map_failure_async", "map_failure_await",
    "bind_async", "bind_await", "bind_failure_async", "bind_failure_await",
    "match_async", "match_await", "tap_async", "tap_await",
    # Ambient
    "get_settings", "get_logger", "configure_logging",
]
