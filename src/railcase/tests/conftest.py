"""Shared fixtures: isolated settings/logging and a survivable fail-fast."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from railcase.errors import critical
from railcase.foundation.config import clear_settings_cache
from railcase.observability import configure_logging, reset_logging

if TYPE_CHECKING:
    from collections.abc import Iterator


class ProcessTerminated(BaseException):
    """Raised in place of os.abort()/os._exit() so the test process survives."""

    def __init__(self, how: str, code: int | None = None) -> None:
        self.how, self.code = how, code
        super().__init__(how, code)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Fresh settings and silent logging for every test."""
    for var in ("RAILCASE_DEBUG", "RAILCASE_LOG_LEVEL", "RAILCASE_LOG_FORMAT",
                "RAILCASE_FAILFAST_MODE", "RAILCASE_FAILFAST_EXIT_CODE", "RAILCASE_FAILFAST_LOG"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    configure_logging(format="none")
    yield
    reset_logging()
    clear_settings_cache()


@pytest.fixture
def terminations(monkeypatch: pytest.MonkeyPatch) -> list[ProcessTerminated]:
    """Replace process termination with a ProcessTerminated raise; records each call."""
    seen: list[ProcessTerminated] = []

    def _abort() -> None:
        seen.append(exc := ProcessTerminated("abort"))
        raise exc

    def _exit(code: int) -> None:
        seen.append(exc := ProcessTerminated("exit", code))
        raise exc

    monkeypatch.setattr(critical.os, "abort", _abort)
    monkeypatch.setattr(critical.os, "_exit", _exit)
    return seen


@pytest.fixture
def log_buffer() -> io.StringIO:
    """Route JSON log lines at DEBUG level into a buffer."""
    buf = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=buf)
    return buf
