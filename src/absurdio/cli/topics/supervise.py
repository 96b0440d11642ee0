SUPERVISE = """
TOPIC: supervise
================

Fail-fast groups of forever-running tasks.

CONTEXT MANAGER:
    async with FailFastGroup("main") as group:
        group.spawn(absurd_future(heartbeat()), name="heartbeat")
        group.spawn(counter(), name="counter")
    # leaving the block runs the group; it always raises

EXPLICIT:
    group = FailFastGroup("main", drain_timeout=0.5)
    group.spawn(...)
    await group.run()                # -> Never

ONE-SHOT:
    await run_forever(a(), b(), names=["a", "b"])

LIFECYCLE:
    running     accepting spawn() calls
    waiting     run() started, no more spawns; waiting for the first to finish
    draining    every sibling asked to cancel (one batch, no waiting in between)
    terminated  siblings given at most drain_timeout seconds, then the report is raised

If the code awaiting run() is cancelled, all members are cancelled too.
"""
