"""Runtime - Concurrency and observability for absurdio.

Contains: the never-returning adapter, fail-fast groups, wait primitives, logging.
"""

from __future__ import annotations

from .concurrency import (
    AbsurdFuture,
    FailFastGroup,
    GroupState,
    absurd,
    absurd_future,
    absurd_result,
    never_returns,
    run_forever,
)
from .observability import configure_logging, get_logger, log_context

__all__ = [
    "AbsurdFuture", "absurd", "absurd_future", "absurd_result", "never_returns",
    "FailFastGroup", "GroupState", "run_forever",
    "configure_logging", "get_logger", "log_context",
]
