"""Fail-fast supervision of tasks that are supposed to run forever.

Every member of a ``FailFastGroup`` is expected to run indefinitely, so the
first one to finish is by definition a failure. The group waits for that
first completion, asks every sibling to cancel, and raises exactly one
exception describing what happened:

    ========================  =====================================================
    first task ...            group raises
    ========================  =====================================================
    returned ``Err(e)``       TaskFailedError (application failure)
    raised an exception       TaskCrashedError, chained to the original exception
    was cancelled by others   TaskCancelledError
    (no tasks at all)         EmptyGroupError
    returned anything else    ImpossibleStateError (contract violation, fatal)
    ========================  =====================================================

Tasks that can only fail by raising are declared ``-> Never`` and spawned
through ``absurd_future``; tasks with an explicit failure channel return
``Result[Never, E]``.

Example:
    >>> async with FailFastGroup("main") as group:
    ...     group.spawn(absurd_future(heartbeat()), name="heartbeat")
    ...     group.spawn(counter(limit=3), name="counter")
    ... # exiting the block runs the group; it always raises
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Never

from absurdio.foundation.config import get_settings
from absurdio.foundation.errors import (
    EmptyGroupError,
    FailureKind,
    FailureReport,
    ImpossibleStateError,
    Result,
    TaskCancelledError,
    TaskCrashedError,
    TaskFailedError,
)
from absurdio.runtime.observability.logging import BoundLogger, get_logger

from .task import TaskHandle, spawn
from .wait import cancel_all, drain, wait_any

if TYPE_CHECKING:
    from types import TracebackType


class GroupState(StrEnum):
    """Group lifecycle states."""
    RUNNING = "running"        # Accepting spawns
    WAITING = "waiting"        # run() started, waiting for the first completion
    DRAINING = "draining"      # First completion seen, siblings being cancelled
    TERMINATED = "terminated"  # Failure decided; the group is spent


class FailFastGroup:
    """Owns a set of forever-running tasks and fails as soon as one finishes.

    Attributes:
        name: Group name used in reports and logs
        drain_timeout: Seconds cancelled siblings get to unwind before the
            report is raised (0 = don't wait). The group never waits longer.
    """

    __slots__ = ("name", "drain_timeout", "_handles", "_state", "_log")

    def __init__(
        self,
        name: str | None = None,
        *,
        drain_timeout: float | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        settings = get_settings().supervisor
        self.name = (name or "").strip() or settings.group_name
        self.drain_timeout = settings.drain_timeout if drain_timeout is None else drain_timeout
        if self.drain_timeout < 0:
            raise ValueError(f"drain_timeout must be >= 0, got {self.drain_timeout}")
        self._handles: list[TaskHandle[Any]] = []
        self._state = GroupState.RUNNING
        self._log = (logger or get_logger("absurdio.supervise")).bind(group=self.name)

    @property
    def state(self) -> GroupState:
        return self._state

    @property
    def handles(self) -> tuple[TaskHandle[Any], ...]:
        """Member handles in spawn order."""
        return tuple(self._handles)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> TaskHandle[Any]:
        """Start ``coro`` as a member task.

        Raises:
            RuntimeError: If run() already started
        """
        if self._state is not GroupState.RUNNING:
            coro.close()
            raise RuntimeError(f"Cannot spawn into group {self.name!r} while {self._state}")
        handle = spawn(coro, name=name, index=len(self._handles))
        self._handles.append(handle)
        self._log.debug("task spawned", task=handle.name, index=handle.index)
        return handle

    async def run(self) -> Never:
        """Wait for the first member to finish, cancel the rest, raise the failure.

        Never returns. If the caller is cancelled while waiting, every member
        is cancelled and the cancellation propagates.

        Raises:
            TaskFailedError | TaskCrashedError | TaskCancelledError | EmptyGroupError:
                Consolidated failure report
            ImpossibleStateError: A member finished with a value
            RuntimeError: If the group already ran
        """
        if self._state is not GroupState.RUNNING:
            raise RuntimeError(f"Group {self.name!r} already ran (state: {self._state})")
        self._state = GroupState.WAITING
        self._log.info("supervising", tasks=len(self._handles))

        try:
            first = await wait_any(self._handles)
        except asyncio.CancelledError:
            self._state = GroupState.TERMINATED
            self._log.warning("supervisor cancelled", cancelled=cancel_all(self._handles, "supervisor cancelled"))
            raise

        if first is None:
            self._state = GroupState.TERMINATED
            self._log.error("no tasks present")
            raise EmptyGroupError(FailureReport(group=self.name, kind=FailureKind.EMPTY, message="no tasks present"))

        finished = first.value
        self._state = GroupState.DRAINING
        siblings = [h for h in self._handles if h is not finished]
        cancelled = cancel_all(siblings, f"sibling {finished.name!r} finished")
        log = self._log.bind_task(finished.name, finished.index)
        log.warning("task finished, cancelling siblings", cancelled=cancelled,
                    elapsed=round(first.elapsed, 3), pending=first.pending)

        try:
            unwinding = await drain(siblings, self.drain_timeout)
        finally:
            self._state = GroupState.TERMINATED
            for handle in siblings:
                handle.task.add_done_callback(_consume_outcome)
        if unwinding:
            log.warning("siblings still unwinding", tasks=[h.name for h in unwinding])

        failure, cause = classify(finished, group=self.name, cancelled=cancelled,
                                  unwinding=len(unwinding))
        report = failure.report
        if report is not None:
            (log.critical if report.kind is FailureKind.IMPOSSIBLE else log.error)(
                "group terminated", kind=report.kind.value, message=report.message,
            )
        raise failure from cause

    async def __aenter__(self) -> FailFastGroup:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if exc_val is None:
            await self.run()
        # Body failed before supervision started: don't leave members behind
        self._state = GroupState.TERMINATED
        cancel_all(self._handles, "group body failed")
        await drain(self._handles, self.drain_timeout)
        for handle in self._handles:
            handle.task.add_done_callback(_consume_outcome)
        return False

    def __repr__(self) -> str:
        return f"FailFastGroup(name={self.name!r}, state={self._state}, tasks={len(self._handles)})"


def classify(
    handle: TaskHandle[Any],
    *,
    group: str,
    cancelled: int = 0,
    unwinding: int = 0,
) -> tuple[TaskFailedError | TaskCrashedError | TaskCancelledError | ImpossibleStateError, BaseException | None]:
    """Map a finished handle to the exception a group raises for it, plus its cause.

    The kind lives on the returned exception's ``report``. ``cancelled`` and
    ``unwinding`` are the sibling counts recorded in that report.

    Raises:
        RuntimeError: If the handle never started
        asyncio.InvalidStateError: If the handle is still running
    """
    if not handle.task.done():
        raise asyncio.InvalidStateError(f"Task {handle.name!r} is still running")
    common = {"group": group, "task": handle.name, "index": handle.index,
              "cancelled": cancelled, "unwinding": unwinding}
    task = handle.task

    # A group classifies its first finished task before cancelling anything,
    # so a cancelled one was stopped from outside.
    if task.cancelled():
        report = FailureReport(kind=FailureKind.CANCELLED, message="task was cancelled unexpectedly", **common)
        return TaskCancelledError(report), None

    if (exc := task.exception()) is not None:
        if isinstance(exc, ImpossibleStateError):
            return ImpossibleStateError(report=FailureReport(
                kind=FailureKind.IMPOSSIBLE, message=str(exc), **common)), exc
        report = FailureReport(kind=FailureKind.CRASHED, message=f"{type(exc).__name__}: {exc}",
                               details=type(exc).__qualname__, **common)
        return TaskCrashedError(report, exc), exc

    value = task.result()
    if isinstance(value, Result) and value.is_err():
        error = value.unwrap_err()
        report = FailureReport(kind=FailureKind.FAILED, message=error, **common)
        return TaskFailedError(report, error), error if isinstance(error, BaseException) else None

    return ImpossibleStateError(report=FailureReport(
        kind=FailureKind.IMPOSSIBLE, message=f"task declared to run forever returned {value!r}", **common)), None



def _consume_outcome(task: asyncio.Task[Any]) -> None:
    # Sibling outcomes are superseded by the group's report; mark them retrieved.
    if not task.cancelled():
        task.exception()


async def run_forever(
    *coros: Coroutine[Any, Any, Any],
    name: str | None = None,
    names: Sequence[str] | None = None,
    drain_timeout: float | None = None,
) -> Never:
    """Supervise ``coros`` as one fail-fast group. Never returns.

    Example:
        >>> await run_forever(absurd_future(heartbeat()), counter(), names=["heartbeat", "counter"])
    """
    if names is not None and len(names) != len(coros):
        for coro in coros:
            coro.close()
        raise ValueError(f"Got {len(names)} names for {len(coros)} tasks")
    group = FailFastGroup(name, drain_timeout=drain_timeout)
    for i, coro in enumerate(coros):
        group.spawn(coro, name=names[i] if names else None)
    await group.run()
