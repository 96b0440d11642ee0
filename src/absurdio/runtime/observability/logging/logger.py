"""Structured logging for supervised tasks with context propagation.

Provides context-aware structured logging:
- Group/task context binding
- Human-readable dev output, JSON for production
- Scoped context that follows async calls

Quick Start:
    >>> from absurdio.runtime.observability.logging import get_logger, configure_logging
    >>>
    >>> # Configure (once at startup)
    >>> configure_logging(format="console")  # or "json" for production
    >>>
    >>> log = get_logger("supervisor")
    >>> log.info("task spawned", task="heartbeat", index=0)

    >>> # Bind task context
    >>> log = log.bind_task("counter", 1)
    >>> log.warning("task finished")
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
import time
import traceback
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, Protocol, TextIO, TypeVar, runtime_checkable

import orjson

from absurdio.foundation.errors import JsonDict, JsonValue

if TYPE_CHECKING:
    from types import TracebackType

P = ParamSpec("P")
T = TypeVar("T")

# Context var for bound context (persists across async calls)
_log_context: ContextVar[JsonDict] = ContextVar("log_context", default={})


# ─────────────────────────────────────────────────────────────────────────────
# Core Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class BoundLogger:
    """Structured logger with bound context. Immutable - bind() returns a new logger with merged context.

    Example:
        >>> log = BoundLogger(context={"group": "main"})
        >>> log.info("task spawned", task="counter")
        # => 10:30:45.123 [info] task spawned group="main" task="counter"
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int = logging.DEBUG

    def bind(self, **kw: JsonValue) -> BoundLogger:
        """Create new logger with additional bound context."""
        return BoundLogger(context={**self.context, **kw}, _renderer=self._renderer, _level=self._level)

    def bind_task(self, name: str, index: int, **kw: JsonValue) -> BoundLogger:
        """Bind supervised task context."""
        return self.bind(task=name, index=index, **kw)

    def unbind(self, *keys: str) -> BoundLogger:
        """Create new logger without specified keys."""
        return BoundLogger(context={k: v for k, v in self.context.items() if k not in keys},
                           _renderer=self._renderer, _level=self._level)

    def new(self, **kw: JsonValue) -> BoundLogger:
        """Create new logger with only specified context (drops inherited)."""
        return BoundLogger(context=dict(kw), _renderer=self._renderer, _level=self._level)

    def _log(self, level: int, event: str, **kw: JsonValue) -> None:
        if level < self._level:
            return
        # Merge contexts: scoped -> bound -> call-site
        merged = {**_log_context.get(), **self.context, **kw}
        (self._renderer or _get_renderer()).render(LogEntry(time.time(), _level_name(level), event, merged))

    def debug(self, event: str, **kw: JsonValue) -> None: self._log(logging.DEBUG, event, **kw)
    def info(self, event: str, **kw: JsonValue) -> None: self._log(logging.INFO, event, **kw)
    def warning(self, event: str, **kw: JsonValue) -> None: self._log(logging.WARNING, event, **kw)
    def error(self, event: str, **kw: JsonValue) -> None: self._log(logging.ERROR, event, **kw)
    def critical(self, event: str, **kw: JsonValue) -> None: self._log(logging.CRITICAL, event, **kw)

    def exception(self, event: str, exc: BaseException | None = None, **kw: JsonValue) -> None:
        """Log error with exception info (the one being handled, or ``exc``)."""
        info = "".join(traceback.format_exception(exc)) if exc is not None else traceback.format_exc()
        self._log(logging.ERROR, event, exc_info=info, **kw)

    def scope(self, **kw: JsonValue) -> log_context:
        """Scoped context for every logger, not just this one.

        Example:
            >>> with log.scope(command="demo"):
            ...     log.info("starting")  # includes command
        """
        return log_context(**kw)


@dataclass(slots=True)
class LogEntry:
    """Log entry with all context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def ts_iso(self) -> str:
        """ISO formatted timestamp."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """Human-readable timestamp (HH:MM:SS.mmm)."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable colored console output. Format: timestamp [level] event key=value ..."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None  # None = auto-detect
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.colors is None:
            self.colors = getattr(self.output, "isatty", lambda: False)()

    def render(self, entry: LogEntry) -> None:
        c = _COLORS if self.colors else _NO_COLORS
        parts = ([f"{c['dim']}{entry.ts_human}{c['reset']}"] if self.show_timestamp else [])
        parts += [f"{_LEVEL_COLORS.get(entry.level, c['dim']) if self.colors else ''}[{entry.level}]{c['reset']}",
                  f"{c['bold']}{entry.event}{c['reset']}"]
        parts += [f"{c['cyan']}{k}{c['reset']}={_format_value(v, c)}"
                  for k, v in sorted(entry.context.items()) if k != "exc_info"]
        print(" ".join(parts), file=self.output)
        if "exc_info" in entry.context:
            print(f"{c['red']}{entry.context['exc_info']}{c['reset']}", file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        print(orjson.dumps({"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event,
                            **entry.context}, option=orjson.OPT_NON_STR_KEYS, default=str).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer."""

    def render(self, entry: LogEntry) -> None:
        pass


@dataclass(slots=True)
class MemoryRenderer:
    """Keeps entries in a list for inspection in tests."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self, level: str | None = None) -> list[str]:
        return [e.event for e in self.entries if level is None or e.level == level]


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: ContextVar[LogRenderer | None] = ContextVar("log_renderer", default=None)
_default_level: ContextVar[int] = ContextVar("log_level", default=logging.INFO)


def configure_logging(
    format: str = "console",  # noqa: A002 - shadows builtin but matches stdlib
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Configure global structured logging. Format: "console" (human), "json" (machine), "none"."""
    _default_level.set(getattr(logging, level.upper(), logging.INFO))
    match format:
        case "console": renderer: LogRenderer = ConsoleRenderer(output=output or sys.stderr, colors=colors)
        case "json": renderer = JsonRenderer(output=output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _renderer.set(renderer)
    return renderer


def get_logger(name: str | None = None, **initial_context: JsonValue) -> BoundLogger:
    """Get a structured logger with optional initial context. Name is added to context as 'logger'."""
    ctx = {**initial_context, **({"logger": name} if name else {})}
    return BoundLogger(context=ctx, _level=_default_level.get())


def _get_renderer() -> LogRenderer:
    """Get configured renderer or create default."""
    if (renderer := _renderer.get()) is None:
        _renderer.set(renderer := ConsoleRenderer())
    return renderer


def timed(
    log: BoundLogger | None = None,
    *,
    level: str = "info",
    event: str = "operation completed",
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator to log how long a function ran and how it ended.

    Forever-running coroutines never reach the success line; they log
    ``"{event} failed"`` with the error, or ``"{event} cancelled"``.
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        def _finish(_log: BoundLogger, start: float, err: BaseException | None = None) -> None:
            dur = round((time.perf_counter() - start) * 1000, 2)
            if isinstance(err, asyncio.CancelledError):
                getattr(_log, level)(f"{event} cancelled", function=func.__name__, duration_ms=dur)
            elif err is not None:
                _log.error(f"{event} failed", function=func.__name__, duration_ms=dur, error=str(err))
            else:
                getattr(_log, level)(event, function=func.__name__, duration_ms=dur)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            _log, start = log or get_logger(func.__module__), time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _finish(_log, start, e)
                raise
            _finish(_log, start)
            return result

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            _log, start = log or get_logger(func.__module__), time.perf_counter()
            try:
                result = await func(*args, **kwargs)  # type: ignore[misc]
            except (Exception, asyncio.CancelledError) as e:
                _finish(_log, start, e)
                raise
            _finish(_log, start)
            return result

        return async_wrapper if inspect.iscoroutinefunction(func) else wrapper  # type: ignore[return-value]

    return decorator


class log_context:
    """Context manager for scoped logging context. Adds key-value pairs to all log entries within the scope.

    Tasks created inside the scope copy it, so their entries carry the same keys.
    """

    __slots__ = ("_ctx", "_token")

    def __init__(self, **kw: JsonValue) -> None:
        self._ctx: JsonDict = dict(kw)
        self._token: object | None = None

    def __enter__(self) -> log_context:
        self._token = _log_context.set({**_log_context.get(), **self._ctx})
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        self._token and _log_context.reset(self._token)  # type: ignore[func-returns-value,arg-type]


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


_COLORS = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "red": "\033[31m",
           "green": "\033[32m", "yellow": "\033[33m", "blue": "\033[34m", "cyan": "\033[36m", "white": "\033[37m"}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {"debug": _COLORS["dim"], "info": _COLORS["green"], "warning": _COLORS["yellow"],
                 "error": _COLORS["red"], "critical": _COLORS["red"] + _COLORS["bold"]}


def _level_name(level: int) -> str:
    """Convert logging level int to lowercase name."""
    return logging.getLevelName(level).lower()


def _format_value(v: object, c: dict[str, str]) -> str:
    """Format a value for console output."""
    match v:
        case str(): return f'{c["yellow"]}"{v}"{c["reset"]}'
        case bool(): return f'{c["blue"]}{str(v).lower()}{c["reset"]}'
        case int() | float(): return f'{c["blue"]}{v}{c["reset"]}'
        case dict(): return f'{c["dim"]}{{{len(v)} items}}{c["reset"]}'
        case list() | tuple(): return f'{c["dim"]}[{len(v)} items]{c["reset"]}'
        case _: return f'{c["white"]}{v!r}{c["reset"]}'
