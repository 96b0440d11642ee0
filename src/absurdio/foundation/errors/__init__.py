"""Unified error handling for absurdio.

- FailureKind/FailureReport: Structured description of a group's termination
- SupervisionError and subclasses: The exceptions a terminating group raises
- ImpossibleStateError: Contract violation, a Never-typed value was observed
- Result/Ok/Err: Explicit failure channel for tasks that never succeed
"""

from .errors import (
    EmptyGroupError,
    FailureKind,
    FailureReport,
    ImpossibleStateError,
    SupervisionError,
    TaskCancelledError,
    TaskCrashedError,
    TaskFailedError,
)
from .result import Err, Ok, Result
from .types import JsonDict, JsonValue

__all__ = [
    # Reports & exceptions
    "FailureKind", "FailureReport", "SupervisionError",
    "TaskFailedError", "TaskCrashedError", "TaskCancelledError", "EmptyGroupError",
    "ImpossibleStateError",
    # Result channel
    "Result", "Ok", "Err",
    # JSON aliases
    "JsonDict", "JsonValue",
]
