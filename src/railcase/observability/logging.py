"""Structured logging with context propagation.

Small context-aware logger used at the package's two boundaries: the
exception capture in try_catch and the fail-fast termination path.
- Bound context (immutable, bind() returns a new logger)
- Scoped context via ContextVar (persists across awaits)
- Human-readable console output, JSON Lines for production

Quick Start:
    >>> from railcase.observability import get_logger, configure_logging
    >>> configure_logging(format="console", level="DEBUG")
    >>> log = get_logger("railcase.example")
    >>> log.info("processing", item=123)
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

import orjson

from railcase.foundation.config import get_settings

if TYPE_CHECKING:
    from types import TracebackType

JsonDict = dict[str, Any]

# Context var for scoped context (persists across async calls)
_log_context: ContextVar[JsonDict] = ContextVar("railcase_log_context", default={})


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class LogEntry:
    """Single log record with merged context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def ts_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


@dataclass(slots=True)
class BoundLogger:
    """Structured logger with bound context. bind() returns a new logger with merged context.

    Example:
        >>> log = BoundLogger(context={"component": "exceptional"})
        >>> log.warning("captured", exc_type="ValueError")
        # => 10:30:45.123 [warning] captured component="exceptional" exc_type="ValueError"
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int | None = None

    def bind(self, **kw: Any) -> BoundLogger:
        """Create new logger with additional bound context."""
        return BoundLogger(context={**self.context, **kw}, _renderer=self._renderer, _level=self._level)

    def unbind(self, *keys: str) -> BoundLogger:
        return BoundLogger(context={k: v for k, v in self.context.items() if k not in keys},
                           _renderer=self._renderer, _level=self._level)

    def is_enabled_for(self, level: int) -> bool:
        return level >= (self._level if self._level is not None else _get_level())

    def _log(self, level: int, event: str, **kw: Any) -> None:
        if not self.is_enabled_for(level):
            return
        merged = {**_log_context.get(), **self.context, **kw}
        (self._renderer or _get_renderer()).render(LogEntry(time.time(), _level_name(level), event, merged))

    def debug(self, event: str, **kw: Any) -> None: self._log(logging.DEBUG, event, **kw)
    def info(self, event: str, **kw: Any) -> None: self._log(logging.INFO, event, **kw)
    def warning(self, event: str, **kw: Any) -> None: self._log(logging.WARNING, event, **kw)
    def error(self, event: str, **kw: Any) -> None: self._log(logging.ERROR, event, **kw)
    def critical(self, event: str, **kw: Any) -> None: self._log(logging.CRITICAL, event, **kw)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable output. Format: timestamp [level] event key=value ..."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    show_timestamp: bool = True

    def render(self, entry: LogEntry) -> None:
        parts = [entry.ts_human] if self.show_timestamp else []
        parts += [f"[{entry.level}]", entry.event]
        parts += [f"{k}={_format_value(v)}" for k, v in sorted(entry.context.items())]
        print(" ".join(parts), file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        print(orjson.dumps({"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event,
                            **entry.context}, default=repr, option=orjson.OPT_NON_STR_KEYS).decode(),
              file=self.output, flush=True)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer."""

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: ContextVar[LogRenderer | None] = ContextVar("railcase_log_renderer", default=None)
_level: ContextVar[int | None] = ContextVar("railcase_log_level", default=None)


def configure_logging(
    format: str | None = None,  # noqa: A002 - matches LoggingSettings field
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> LogRenderer:
    """Configure structured logging. Omitted arguments fall back to LoggingSettings.

    Format: "console" (human), "json" (machine), "none".
    """
    cfg = get_settings()
    fmt = (format or cfg.logging.format).lower()
    _level.set(getattr(logging, (level or cfg.effective_log_level).upper(), logging.WARNING))
    match fmt:
        case "console": renderer: LogRenderer = ConsoleRenderer(output=output or sys.stderr)
        case "json": renderer = JsonRenderer(output=output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {fmt}. Use 'console', 'json', or 'none'")
    _renderer.set(renderer)
    return renderer


def reset_logging() -> None:
    """Drop configured renderer and level; the next log call re-reads settings."""
    _renderer.set(None)
    _level.set(None)


def get_logger(name: str | None = None, **initial_context: Any) -> BoundLogger:
    """Get a structured logger. Name is added to context as 'logger'."""
    return BoundLogger(context={**initial_context, **({"logger": name} if name else {})})


class log_context:
    """Context manager adding key-value pairs to every log entry within the scope."""

    __slots__ = ("_ctx", "_token")

    def __init__(self, **kw: Any) -> None:
        self._ctx: JsonDict = dict(kw)
        self._token: object | None = None

    def __enter__(self) -> log_context:
        self._token = _log_context.set({**_log_context.get(), **self._ctx})
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        if self._token is not None:
            _log_context.reset(self._token)  # type: ignore[arg-type]


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _get_renderer() -> LogRenderer:
    if (renderer := _renderer.get()) is None:
        renderer = configure_logging()
    return renderer


def _get_level() -> int:
    if (level := _level.get()) is None:
        configure_logging()
        level = _level.get()
    return level if level is not None else logging.WARNING


def _level_name(level: int) -> str:
    return logging.getLevelName(level).lower()


def _format_value(v: object) -> str:
    match v:
        case str(): return f'"{v}"'
        case bool(): return str(v).lower()
        case int() | float(): return str(v)
        case _: return repr(v)
