"""absurdio - Never-returning tasks and fail-fast supervision for asyncio.

Background services are written as coroutines that never return
(``-> Never``). absurdio lets them sit next to ordinary tasks and stops the
whole set as soon as any of them stops.

Quick Start:
    >>> import asyncio
    >>> from typing import Never
    >>> from absurdio import FailFastGroup, Err, Result, absurd_future
    >>>
    >>> async def heartbeat() -> Never:
    ...     while True:
    ...         await asyncio.sleep(1)
    >>>
    >>> async def counter() -> Result[Never, str]:
    ...     await asyncio.sleep(3)
    ...     return Err("Counter is >= 3")
    >>>
    >>> async def main() -> Never:
    ...     async with FailFastGroup("main") as group:
    ...         group.spawn(absurd_future(heartbeat()), name="heartbeat")
    ...         group.spawn(counter(), name="counter")
    >>>
    >>> asyncio.run(main())
    Traceback (most recent call last):
    ...
    absurdio.foundation.errors.errors.TaskFailedError: task 'counter' (#1) exited with Counter is >= 3; cancelled 1 sibling
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors & Result channel
from .foundation.errors import (
    EmptyGroupError,
    Err,
    FailureKind,
    FailureReport,
    ImpossibleStateError,
    Ok,
    Result,
    SupervisionError,
    TaskCancelledError,
    TaskCrashedError,
    TaskFailedError,
)

# Config
from .foundation.config import AbsurdioSettings, clear_settings_cache, get_settings

# Concurrency
from .runtime.concurrency import (
    AbsurdFuture,
    FailFastGroup,
    GroupState,
    TaskHandle,
    TaskState,
    absurd,
    absurd_future,
    absurd_result,
    never_returns,
    run_forever,
)

# Logging
from .runtime.observability import configure_logging, get_logger, log_context, timed

__all__ = [
    "__version__",
    # Adapter
    "AbsurdFuture", "absurd", "absurd_future", "absurd_result", "never_returns",
    # Supervision
    "FailFastGroup", "GroupState", "TaskHandle", "TaskState", "run_forever",
    # Errors
    "FailureKind", "FailureReport", "SupervisionError",
    "TaskFailedError", "TaskCrashedError", "TaskCancelledError", "EmptyGroupError",
    "ImpossibleStateError",
    "Result", "Ok", "Err",
    # Config
    "AbsurdioSettings", "get_settings", "clear_settings_cache",
    # Logging
    "configure_logging", "get_logger", "log_context", "timed",
]
