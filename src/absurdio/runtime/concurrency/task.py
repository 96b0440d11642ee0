"""Task handles for supervised concurrency.

A ``TaskHandle`` wraps the ``asyncio.Task`` spawned for one group member and
remembers whether the group itself asked it to stop, which is how an
unexpected outside cancellation is told apart from a supervised one.

Example:
    >>> handle = spawn(heartbeat(), name="heartbeat", index=0)
    >>> handle.state
    <TaskState.RUNNING: 'running'>
    >>> handle.cancel("group draining")
    True
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class TaskState(StrEnum):
    """Task lifecycle states."""
    PENDING = "pending"      # Not yet started
    RUNNING = "running"      # Currently executing
    COMPLETED = "completed"  # Returned a value
    FAILED = "failed"        # Raised exception
    CANCELLED = "cancelled"  # Was cancelled


@dataclass(slots=True, eq=False)
class TaskHandle(Generic[T]):
    """Handle to a spawned task with state access.

    Provides access to task state, result, and cancellation control
    without exposing the underlying asyncio.Task directly.

    Attributes:
        name: Task name for reports and logs
        index: Spawn position within the owning group
        cancel_requested: Whether ``cancel()`` was called through this handle
    """

    name: str
    index: int = 0
    cancel_requested: bool = False
    _task: asyncio.Task[T] | None = field(default=None, repr=False)

    @property
    def task(self) -> asyncio.Task[T]:
        if self._task is None:
            raise RuntimeError(f"Task {self.name!r} not started")
        return self._task

    @property
    def state(self) -> TaskState:
        """Current task state."""
        if self._task is None:
            return TaskState.PENDING
        if self._task.cancelled():
            return TaskState.CANCELLED
        if self._task.done():
            return TaskState.FAILED if self._task.exception() else TaskState.COMPLETED
        return TaskState.RUNNING

    @property
    def done(self) -> bool:
        """Whether task has finished (success, failure, or cancelled)."""
        return self._task is not None and self._task.done()

    @property
    def cancelled_externally(self) -> bool:
        """Finished by cancellation that did not come through this handle."""
        return self._task is not None and self._task.cancelled() and not self.cancel_requested

    def result(self) -> T:
        """Get task result.

        Raises:
            RuntimeError: If task not started
            asyncio.InvalidStateError: If task not complete
            Exception: If task failed with exception
            asyncio.CancelledError: If task was cancelled
        """
        return self.task.result()

    def exception(self) -> BaseException | None:
        """Get task exception, or None if successful or still running."""
        if self._task is None or not self._task.done() or self._task.cancelled():
            return None
        return self._task.exception()

    def cancel(self, msg: str | None = None) -> bool:
        """Request task cancellation.

        Returns:
            True if cancellation was requested, False if task already done
        """
        if self._task is None or self._task.done():
            return False
        self.cancel_requested = True
        return self._task.cancel(msg)

    async def wait(self) -> T:
        """Wait for task completion and return result."""
        return await self.task


def spawn(
    coro: Coroutine[object, object, T],
    *,
    name: str | None = None,
    index: int = 0,
) -> TaskHandle[T]:
    """Schedule ``coro`` on the running loop and return its handle.

    Args:
        coro: Coroutine (or AbsurdFuture) to run
        name: Task name; defaults to ``task-{index}``
        index: Position within the owning group

    Raises:
        RuntimeError: If no event loop is running
    """
    name = name or f"task-{index}"
    return TaskHandle(name=name, index=index, _task=asyncio.create_task(coro, name=name))

