"""Tests for fail-fast supervision.

Validates:
- First failure wins and every sibling is asked to cancel
- Each failure kind is reported distinctly (failed, crashed, cancelled, empty)
- Successful completion of a forever-task is a contract violation
- Drain window, external cancellation of the supervisor, lifecycle guards
"""

from __future__ import annotations

import asyncio
from typing import Never

import pytest

from absurdio.examples import counter, heartbeat
from absurdio.foundation.errors import (
    EmptyGroupError,
    Err,
    FailureKind,
    ImpossibleStateError,
    Ok,
    Result,
    SupervisionError,
    TaskCancelledError,
    TaskCrashedError,
    TaskFailedError,
)
from absurdio.runtime.concurrency import (
    FailFastGroup,
    GroupState,
    TaskState,
    absurd_future,
    classify,
    run_forever,
    spawn,
)
from absurdio.runtime.observability import BoundLogger, MemoryRenderer


# ─────────────────────────────────────────────────────────────────────────────
# Test Fixtures: forever-tasks
# ─────────────────────────────────────────────────────────────────────────────


async def forever() -> Never:
    while True:
        await asyncio.sleep(3600)


async def fail_after(delay: float, error: object = "boom") -> Result[Never, object]:
    await asyncio.sleep(delay)
    return Err(error)


async def crash_after(delay: float, exc: BaseException) -> Never:
    await asyncio.sleep(delay)
    raise exc


async def stubborn(unwind: float) -> Never:
    """Takes ``unwind`` seconds to honour a cancellation."""
    while True:
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            await asyncio.sleep(unwind)
            raise


# ═════════════════════════════════════════════════════════════════════════════
# Heartbeat/counter program
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_counter_failure_cancels_heartbeat(log: BoundLogger) -> None:
    group = FailFastGroup("main", drain_timeout=1.0, logger=log)
    beat = group.spawn(absurd_future(heartbeat(0.01, log=log)), name="heartbeat")
    count = group.spawn(counter(3, 0.01, log=log), name="counter")

    with pytest.raises(TaskFailedError) as info:
        await group.run()

    report = info.value.report
    assert report.kind is FailureKind.FAILED
    assert (report.task, report.index) == ("counter", 1)
    assert report.message == "Counter is >= 3"
    assert report.cancelled == 1
    assert report.unwinding == 0
    assert info.value.error == "Counter is >= 3"
    assert beat.cancel_requested and beat.state is TaskState.CANCELLED
    assert count.state is TaskState.COMPLETED
    assert group.state is GroupState.TERMINATED


@pytest.mark.asyncio
async def test_counter_runs_three_cycles(log: BoundLogger, memory: MemoryRenderer) -> None:
    with pytest.raises(TaskFailedError):
        await run_forever(counter(3, 0.001, log=log), drain_timeout=0)

    ticks = [e.context["count"] for e in memory.entries if e.event == "Hello from task 2"]
    assert ticks == [0, 1, 2]


@pytest.mark.asyncio
async def test_context_manager_runs_group_on_exit() -> None:
    with pytest.raises(TaskFailedError, match="Counter is >= 2"):
        async with FailFastGroup("main", drain_timeout=1.0) as group:
            group.spawn(absurd_future(heartbeat(0.01)), name="heartbeat")
            group.spawn(counter(2, 0.01), name="counter")
    assert group.handles[0].state is TaskState.CANCELLED


# ═════════════════════════════════════════════════════════════════════════════
# First failure wins
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_first_failure_wins_and_all_siblings_cancelled() -> None:
    group = FailFastGroup("workers", drain_timeout=1.0)
    siblings = [group.spawn(absurd_future(forever()), name=f"idle-{i}") for i in range(3)]
    group.spawn(fail_after(0.01, "first"), name="early")
    group.spawn(fail_after(0.5, "second"), name="late")

    with pytest.raises(TaskFailedError) as info:
        await group.run()

    assert info.value.report.task == "early"
    assert info.value.report.cancelled == 4
    late = group.handles[4]
    assert all(h.cancel_requested for h in [*siblings, late])
    assert all(h.state is TaskState.CANCELLED for h in [*siblings, late])


@pytest.mark.asyncio
async def test_crash_is_distinct_from_failure() -> None:
    boom = RuntimeError("exceeded invariant")
    group = FailFastGroup("workers", drain_timeout=1.0)
    group.spawn(absurd_future(forever()), name="idle")
    group.spawn(absurd_future(crash_after(0.01, boom)), name="crasher")

    with pytest.raises(TaskCrashedError) as info:
        await group.run()

    assert info.value.report.kind is FailureKind.CRASHED
    assert info.value.report.message == "RuntimeError: exceeded invariant"
    assert info.value.report.details == "RuntimeError"
    assert info.value.error is boom
    assert info.value.__cause__ is boom
    assert not isinstance(info.value, TaskFailedError)


@pytest.mark.asyncio
async def test_err_carrying_exception_is_chained() -> None:
    cause = ValueError("bad reading")
    with pytest.raises(TaskFailedError) as info:
        await run_forever(fail_after(0, cause), drain_timeout=0)
    assert info.value.error is cause
    assert info.value.__cause__ is cause
    assert info.value.report.message == "bad reading"


# ═════════════════════════════════════════════════════════════════════════════
# Empty group & external cancellation
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_empty_group_reports_no_tasks() -> None:
    group = FailFastGroup("empty")

    with pytest.raises(SupervisionError) as info:
        await group.run()

    assert type(info.value) is EmptyGroupError
    assert info.value.report.kind is FailureKind.EMPTY
    assert info.value.report.message == "no tasks present"
    assert info.value.report.task is None
    assert group.state is GroupState.TERMINATED


@pytest.mark.asyncio
async def test_external_cancellation_is_reported_distinctly() -> None:
    group = FailFastGroup("workers", drain_timeout=1.0)
    idle = group.spawn(absurd_future(forever()), name="idle")
    victim = group.spawn(absurd_future(forever()), name="victim")
    asyncio.get_running_loop().call_later(0.01, victim.task.cancel)

    with pytest.raises(TaskCancelledError) as info:
        await group.run()

    report = info.value.report
    assert report.kind is FailureKind.CANCELLED
    assert (report.task, report.index) == ("victim", 1)
    assert "cancelled unexpectedly" in report.render()
    assert victim.cancelled_externally
    assert idle.cancel_requested and not idle.cancelled_externally


@pytest.mark.asyncio
async def test_cancelling_supervisor_cancels_members() -> None:
    group = FailFastGroup("workers", drain_timeout=0)
    members = [group.spawn(absurd_future(forever()), name=f"m{i}") for i in range(2)]
    runner = asyncio.create_task(group.run())
    await asyncio.sleep(0.01)

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner
    await asyncio.wait([m.task for m in members], timeout=1.0)

    assert all(m.state is TaskState.CANCELLED for m in members)
    assert group.state is GroupState.TERMINATED


# ═════════════════════════════════════════════════════════════════════════════
# Contract violations
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_plain_return_is_contract_violation() -> None:
    async def returns() -> int:
        await asyncio.sleep(0.01)
        return 42

    group = FailFastGroup("workers", drain_timeout=1.0)
    idle = group.spawn(absurd_future(forever()), name="idle")
    group.spawn(returns(), name="liar")

    with pytest.raises(ImpossibleStateError) as info:
        await group.run()

    assert info.value.report is not None
    assert info.value.report.kind is FailureKind.IMPOSSIBLE
    assert info.value.report.severity == "critical"
    assert "42" in info.value.report.message
    assert idle.state is TaskState.CANCELLED


@pytest.mark.asyncio
async def test_ok_result_is_contract_violation() -> None:
    async def succeeds() -> Result[Never, str]:
        return Ok(1)  # type: ignore[arg-type]

    with pytest.raises(ImpossibleStateError, match="Ok"):
        await run_forever(succeeds(), drain_timeout=0)


@pytest.mark.asyncio
async def test_adapter_violation_surfaces_as_contract_violation() -> None:
    async def stops() -> Never:
        await asyncio.sleep(0.01)
        return None  # type: ignore[return-value]

    with pytest.raises(ImpossibleStateError) as info:
        await run_forever(absurd_future(stops()), absurd_future(forever()), names=["stops", "idle"], drain_timeout=1.0)

    assert info.value.report is not None and info.value.report.task == "stops"
    assert isinstance(info.value.__cause__, ImpossibleStateError)


# ═════════════════════════════════════════════════════════════════════════════
# Drain window & lifecycle
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_zero_drain_does_not_wait_for_unwinding() -> None:
    group = FailFastGroup("workers", drain_timeout=0)
    slow = group.spawn(absurd_future(stubborn(0.05)), name="slow")
    group.spawn(fail_after(0.01), name="failing")

    with pytest.raises(TaskFailedError) as info:
        await group.run()

    assert info.value.report.unwinding == 1
    assert "still unwinding" in info.value.report.render()
    assert slow.cancel_requested and not slow.done
    await asyncio.wait([slow.task], timeout=1.0)
    assert slow.state is TaskState.CANCELLED


@pytest.mark.asyncio
async def test_drain_waits_for_slow_siblings() -> None:
    group = FailFastGroup("workers", drain_timeout=1.0)
    slow = group.spawn(absurd_future(stubborn(0.02)), name="slow")
    group.spawn(fail_after(0.01), name="failing")

    with pytest.raises(TaskFailedError) as info:
        await group.run()

    assert info.value.report.unwinding == 0
    assert slow.state is TaskState.CANCELLED


@pytest.mark.asyncio
async def test_spawn_and_run_refused_after_run() -> None:
    group = FailFastGroup("once")
    with pytest.raises(EmptyGroupError):
        await group.run()

    coro = forever()
    with pytest.raises(RuntimeError, match="Cannot spawn"):
        group.spawn(coro)
    assert coro.cr_frame is None
    with pytest.raises(RuntimeError, match="already ran"):
        await group.run()


@pytest.mark.asyncio
async def test_body_error_cancels_members_and_propagates() -> None:
    with pytest.raises(KeyError):
        async with FailFastGroup("main", drain_timeout=1.0) as group:
            group.spawn(absurd_future(forever()), name="idle")
            raise KeyError("setup failed")
    assert group.handles[0].state is TaskState.CANCELLED
    assert group.state is GroupState.TERMINATED


@pytest.mark.asyncio
async def test_run_forever_validates_names() -> None:
    with pytest.raises(ValueError, match="names"):
        await run_forever(forever(), forever(), names=["only-one"])


@pytest.mark.asyncio
async def test_default_names_and_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from absurdio.foundation.config import clear_settings_cache

    monkeypatch.setenv("ABSURDIO_SUPERVISOR_GROUP_NAME", "svc")
    monkeypatch.setenv("ABSURDIO_SUPERVISOR_DRAIN_TIMEOUT", "0.25")
    clear_settings_cache()

    group = FailFastGroup()
    handle = group.spawn(fail_after(0))
    assert (group.name, group.drain_timeout) == ("svc", 0.25)
    assert handle.name == "task-0"
    with pytest.raises(TaskFailedError, match="'task-0'"):
        await group.run()


def test_negative_drain_timeout_rejected() -> None:
    with pytest.raises(ValueError, match="drain_timeout"):
        FailFastGroup("bad", drain_timeout=-1)


@pytest.mark.asyncio
async def test_lifecycle_is_logged(log: BoundLogger, memory: MemoryRenderer) -> None:
    group = FailFastGroup("main", drain_timeout=1.0, logger=log)
    group.spawn(absurd_future(forever()), name="idle")
    group.spawn(fail_after(0.01, "nope"), name="failing")

    with pytest.raises(TaskFailedError):
        await group.run()

    assert memory.events() == [
        "task spawned", "task spawned", "supervising",
        "task finished, cancelling siblings", "group terminated",
    ]
    finished = memory.entries[3].context
    assert finished["pending"] == 1 and finished["elapsed"] >= 0
    final = memory.entries[-1]
    assert final.level == "error"
    assert final.context["group"] == "main" and final.context["task"] == "failing"
    assert final.context["kind"] == "failed"


@pytest.mark.asyncio
async def test_spawn_refused_while_waiting() -> None:
    group = FailFastGroup("main", drain_timeout=1.0)
    idle = group.spawn(absurd_future(forever()), name="idle")
    runner = asyncio.create_task(group.run())
    await asyncio.sleep(0.01)
    assert group.state is GroupState.WAITING

    late = fail_after(0.01, "late")
    with pytest.raises(RuntimeError, match="Cannot spawn"):
        group.spawn(late, name="late")
    assert late.cr_frame is None
    assert len(group.handles) == 1

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner
    await asyncio.wait([idle.task])
    assert idle.state is TaskState.CANCELLED


# ═════════════════════════════════════════════════════════════════════════════
# Blank messages & names
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(("payload", "message"), [("   ", "<no message>"), (ValueError(" \n"), "ValueError")])
async def test_blank_err_payload_is_still_a_failure(payload: object, message: str) -> None:
    group = FailFastGroup("main", drain_timeout=1.0)
    group.spawn(absurd_future(forever()), name="idle")
    group.spawn(fail_after(0.01, payload), name="blank")

    with pytest.raises(TaskFailedError) as info:
        await group.run()

    assert info.value.report.message == message
    assert info.value.error is payload


@pytest.mark.asyncio
async def test_blank_group_name_falls_back_to_settings() -> None:
    group = FailFastGroup("   ", drain_timeout=0)
    group.spawn(fail_after(0, "x"), name="t")

    with pytest.raises(TaskFailedError) as info:
        await group.run()

    assert group.name == "main"
    assert info.value.report.group == "main"


# ═════════════════════════════════════════════════════════════════════════════
# classify
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_classify_finished_handles() -> None:
    failed = spawn(fail_after(0, "bad"), name="failed", index=2)
    crashed = spawn(crash_after(0, OSError("disk")), name="crashed")
    cancelled = spawn(forever(), name="cancelled")
    await asyncio.sleep(0)
    cancelled.task.cancel()
    await asyncio.wait([failed.task, crashed.task, cancelled.task])

    exc, cause = classify(failed, group="g", cancelled=3)
    assert isinstance(exc, TaskFailedError) and cause is None
    assert (exc.report.kind, exc.report.index, exc.report.cancelled) == (FailureKind.FAILED, 2, 3)

    exc, cause = classify(crashed, group="g")
    assert isinstance(exc, TaskCrashedError) and isinstance(cause, OSError)
    assert exc.report.message == "OSError: disk"

    exc, cause = classify(cancelled, group="g")
    assert isinstance(exc, TaskCancelledError) and cause is None


@pytest.mark.asyncio
async def test_classify_rejects_running_handle() -> None:
    handle = spawn(forever(), name="busy")
    with pytest.raises(asyncio.InvalidStateError, match="busy"):
        classify(handle, group="g")
    handle.cancel()
    await asyncio.wait([handle.task])
