"""The heartbeat/counter program: two forever-tasks under one fail-fast group.

Demonstrates:
- A task that can only fail by raising, declared ``-> Never`` and adapted
- A task with an explicit failure channel, ``Result[Never, str]``
- Composing both in one group that surfaces the first failure
"""

from __future__ import annotations

import asyncio
from typing import Never

from .foundation.config import AbsurdioSettings, get_settings
from .foundation.errors import Err, Result
from .runtime.concurrency import FailFastGroup, absurd_future
from .runtime.observability import BoundLogger, get_logger, timed


async def heartbeat(interval: float = 1.0, *, log: BoundLogger | None = None) -> Never:
    """Say hello every ``interval`` seconds, forever."""
    log = log or get_logger("absurdio.examples", task="heartbeat")
    while True:
        log.info("Hello from task 1")
        await asyncio.sleep(interval)


async def counter(limit: int = 3, interval: float = 1.0, *, log: BoundLogger | None = None) -> Result[Never, str]:
    """Count ticks; fail through the Result channel once the count reaches ``limit``."""
    log = log or get_logger("absurdio.examples", task="counter")
    count = 0
    while True:
        log.info("Hello from task 2", count=count)
        await asyncio.sleep(interval)
        count += 1
        if count >= limit:
            return Err(f"Counter is >= {limit}")


@timed(event="demo run")
async def main_inner(settings: AbsurdioSettings | None = None) -> Never:
    """Run both tasks until the counter fails; raises the group's failure."""
    settings = settings or get_settings()
    demo = settings.demo
    async with FailFastGroup(settings.supervisor.group_name, drain_timeout=settings.supervisor.drain_timeout) as group:
        group.spawn(absurd_future(heartbeat(demo.interval)), name="heartbeat")
        group.spawn(counter(demo.fail_after, demo.interval), name="counter")
    raise AssertionError("unreachable: a fail-fast group never exits normally")
