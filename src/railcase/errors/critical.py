"""Critical faults: exceptions that must never be captured as data.

A critical exception reaching a capture boundary leaves the interpreter in a
state that cannot be trusted (exhausted memory, blown stack, corrupted
internals). The boundary terminates the process instead of returning a value.
"""

from __future__ import annotations

import os
from typing import NoReturn

from railcase.foundation.config import get_settings
from railcase.observability import get_logger

CRITICAL_EXCEPTIONS: tuple[type[BaseException], ...] = (MemoryError, RecursionError, SystemError)

_log = get_logger("railcase.critical")


def is_critical(exc: BaseException) -> bool:
    """True if exc belongs to the fail-fast catalog."""
    return isinstance(exc, CRITICAL_EXCEPTIONS)


def fail_fast(source: str, exc: BaseException | None = None) -> NoReturn:
    """Terminate the process immediately. Cannot be intercepted by except clauses.

    Args:
        source: Where the fault was detected (e.g. "railcase.try_catch")
        exc: The critical exception, if any
    """
    cfg = get_settings().fail_fast
    if cfg.log:
        _log.critical(
            "critical fault",
            source=source,
            exc_type=type(exc).__name__ if exc is not None else None,
            exc_message=str(exc) if exc is not None else None,
            mode=cfg.mode,
        )
    if cfg.mode == "exit":
        os._exit(cfg.exit_code)
    os.abort()


def fail_fast_if_critical(exc: BaseException, source: str) -> None:
    """Call fail_fast when exc is critical, otherwise return."""
    if is_critical(exc):
        fail_fast(source, exc)
