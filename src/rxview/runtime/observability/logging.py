"""Structured logging with bound context.

Each event is a name plus key/value context. Console output for development,
JSON lines for production, nothing at all in tests.

Usage:
    >>> from rxview.runtime.observability import configure_logging, get_logger
    >>> configure_logging("json", "INFO")  # once at startup
    >>> log = get_logger("rxview.gateway", drug="Aspirin")
    >>> log.info("generation complete", namespace="drug_summary")
    {"ts": "...", "level": "info", "logger": "rxview.gateway", "event": "generation complete", ...}
"""

from __future__ import annotations

import logging
import sys
import time
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, TextIO, runtime_checkable

import orjson

Context = dict[str, Any]

_LEVELS: dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}
_BY_NAME = {name.upper(): level for level, name in _LEVELS.items()}


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: float
    level: str
    logger: str | None
    event: str
    context: Context

    def isoformat(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat(timespec="milliseconds")


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """``12:00:01.250 [warning] rxview.retry: attempt failed attempt=1 code=RATE_LIMITED``"""

    output: TextIO = field(default_factory=lambda: sys.stderr)

    def render(self, entry: LogEntry) -> None:
        clock = datetime.fromtimestamp(entry.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        head = f"{clock} [{entry.level}] {entry.logger + ': ' if entry.logger else ''}{entry.event}"
        pairs = " ".join(
            f"{k}={v!r}" if isinstance(v, str) and " " in v else f"{k}={v}"
            for k, v in entry.context.items()
            if k != "exc_info"
        )
        self.output.write(f"{head} {pairs}\n" if pairs else f"{head}\n")
        if tb := entry.context.get("exc_info"):
            self.output.write(tb if tb.endswith("\n") else f"{tb}\n")


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"ts": entry.isoformat(), "level": entry.level, "logger": entry.logger, "event": entry.event}
        line = orjson.dumps({**record, **entry.context}, default=str, option=orjson.OPT_APPEND_NEWLINE)
        self.output.write(line.decode())


class NoOpRenderer:
    def render(self, entry: LogEntry) -> None:
        return None


_renderer: LogRenderer = ConsoleRenderer()
_threshold: int = logging.INFO


@dataclass(frozen=True, slots=True)
class BoundLogger:
    """Logger carrying a name and a fixed context. ``bind`` returns a new logger."""

    name: str | None = None
    context: Context = field(default_factory=dict)

    def bind(self, **context: Any) -> BoundLogger:
        return BoundLogger(self.name, {**self.context, **context})

    def _emit(self, level: int, event: str, context: Context) -> None:
        if level >= _threshold:
            _renderer.render(LogEntry(time.time(), _LEVELS[level], self.name, event, {**self.context, **context}))

    def debug(self, event: str, **context: Any) -> None:
        self._emit(logging.DEBUG, event, context)

    def info(self, event: str, **context: Any) -> None:
        self._emit(logging.INFO, event, context)

    def warning(self, event: str, **context: Any) -> None:
        self._emit(logging.WARNING, event, context)

    def error(self, event: str, **context: Any) -> None:
        self._emit(logging.ERROR, event, context)

    def exception(self, event: str, **context: Any) -> None:
        """Error-level event with the traceback of the exception being handled."""
        self._emit(logging.ERROR, event, {**context, "exc_info": traceback.format_exc()})


def configure_logging(format: str = "console", level: str = "INFO", *, output: TextIO | None = None) -> LogRenderer:  # noqa: A002
    """Select the process-wide renderer ("console", "json" or "none") and minimum level."""
    global _renderer, _threshold
    match format:
        case "console": renderer: LogRenderer = ConsoleRenderer(output or sys.stderr)
        case "json": renderer = JsonRenderer(output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _renderer = renderer
    _threshold = _BY_NAME.get(level.upper(), logging.INFO)
    return renderer


def get_logger(name: str | None = None, **context: Any) -> BoundLogger:
    return BoundLogger(name, context)
