"""Wait strategies over task handles.

The three runtime primitives fail-fast supervision relies on:
    - wait_any: First handle to finish wins
    - cancel_all: Request cancellation of every unfinished handle, as a batch
    - drain: Give cancelled handles a bounded window to unwind

Example:
    >>> first = await wait_any(handles)
    >>> if first is None:
    ...     ...  # nothing to wait on
    >>> cancel_all(h for h in handles if h is not first.value)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .task import TaskHandle

T = TypeVar("T")


@dataclass(slots=True)
class WaitResult(Generic[T]):
    """Result of a wait operation with metadata.

    Attributes:
        value: The finished handle
        index: Position of the finished handle in the waited sequence
        elapsed: Time spent waiting in seconds
        pending: Handles that were still running when the wait returned
    """

    value: T
    index: int = 0
    elapsed: float = 0.0
    pending: int = 0


async def wait_any(handles: Sequence[TaskHandle[T]]) -> WaitResult[TaskHandle[T]] | None:
    """Wait until at least one handle finishes.

    Returns None when there is nothing to wait on. When several handles are
    found finished in the same wake-up, the earliest in ``handles`` wins.
    If the caller is cancelled, the handles are left untouched; cancelling
    them is the owner's call.
    """
    if not handles:
        return None

    start = time.monotonic()
    by_task = {h.task: i for i, h in enumerate(handles)}
    done, pending = await asyncio.wait(by_task, return_when=asyncio.FIRST_COMPLETED)

    index = min(by_task[t] for t in done)
    return WaitResult(
        value=handles[index],
        index=index,
        elapsed=time.monotonic() - start,
        pending=len(pending),
    )


def cancel_all(handles: Iterable[TaskHandle[T]], msg: str | None = None) -> int:
    """Request cancellation of every unfinished handle without awaiting any.

    Returns:
        Number of handles that accepted the request
    """
    return sum(1 for h in handles if h.cancel(msg))


async def drain(handles: Iterable[TaskHandle[T]], timeout: float | None) -> list[TaskHandle[T]]:
    """Wait at most ``timeout`` seconds for handles to finish.

    ``timeout=0`` only checks; ``None`` waits until all are done.

    Returns:
        Handles still running when the window closed, in input order
    """
    running = [h for h in handles if not h.done]
    if running and timeout != 0:
        await asyncio.wait([h.task for h in running], timeout=timeout)
    return [h for h in running if not h.done]
