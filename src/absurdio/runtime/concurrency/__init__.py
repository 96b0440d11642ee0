"""Never-returning tasks and their fail-fast supervision.

Key Components:
    - absurd_future / AbsurdFuture: Re-type a ``-> Never`` awaitable to any output type
    - absurd_result: Re-type the Ok arm of a ``Result[Never, E]``
    - absurd: Runtime guard for the impossible branch
    - FailFastGroup / run_forever: First task to finish cancels the rest
    - wait_any, cancel_all, drain: Runtime primitives over task handles

Design Philosophy:
    - Only the success arm is adapted; failures propagate unchanged
    - Completion of a forever-task is always reported, never absorbed
    - A successful completion is a contract violation, raised loudly

Example:
    >>> from absurdio.runtime.concurrency import FailFastGroup, absurd_future
    >>>
    >>> async with FailFastGroup("main") as group:
    ...     group.spawn(absurd_future(heartbeat()), name="heartbeat")
    ...     group.spawn(counter(), name="counter")
"""

from __future__ import annotations

from .absurd import AbsurdFuture, absurd, absurd_future, absurd_result, never_returns
from .supervise import FailFastGroup, GroupState, classify, run_forever
from .task import TaskHandle, TaskState, spawn
from .wait import WaitResult, cancel_all, drain, wait_any

__all__ = [
    # Adapter
    "AbsurdFuture",
    "absurd",
    "absurd_future",
    "absurd_result",
    "never_returns",
    # Supervision
    "FailFastGroup",
    "GroupState",
    "classify",
    "run_forever",
    # Tasks
    "TaskHandle",
    "TaskState",
    "spawn",
    # Wait strategies
    "WaitResult",
    "cancel_all",
    "drain",
    "wait_any",
]
