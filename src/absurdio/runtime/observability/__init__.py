"""Observability for supervised groups: structured logging."""

from .logging import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogRenderer,
    MemoryRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
    log_context,
    timed,
)

__all__ = [
    "BoundLogger",
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEntry",
    "LogRenderer",
    "MemoryRenderer",
    "NoOpRenderer",
    "configure_logging",
    "get_logger",
    "log_context",
    "timed",
]
