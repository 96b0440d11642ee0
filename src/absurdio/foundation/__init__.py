"""Foundation - Core building blocks for absurdio.

Contains: error reports and exceptions, the Result channel, config.
"""

from __future__ import annotations

from .config import AbsurdioSettings, clear_settings_cache, get_settings
from .errors import (
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

__all__ = [
    # Errors
    "FailureKind", "FailureReport", "SupervisionError",
    "TaskFailedError", "TaskCrashedError", "TaskCancelledError", "EmptyGroupError",
    "ImpossibleStateError",
    "Result", "Ok", "Err",
    # Config
    "AbsurdioSettings", "get_settings", "clear_settings_cache",
]
