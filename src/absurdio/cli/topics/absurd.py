ABSURD = """
TOPIC: absurd
=============

Re-typing awaitables whose success type is uninhabited (typing.Never).

WRAP A FOREVER-TASK:
    async def heartbeat() -> Never:
        while True:
            await asyncio.sleep(1)

    fut: AbsurdFuture[Result[None, str]] = absurd_future(heartbeat())

    # Suspends exactly where heartbeat() suspends, as often as it does.
    # Exceptions from heartbeat() propagate unchanged.
    # If heartbeat() ever returns, ImpossibleStateError is raised.

DECORATOR FORM:
    @never_returns
    async def heartbeat() -> Never: ...

    group.spawn(heartbeat())        # already an AbsurdFuture

RESULT CHANNEL:
    async def counter() -> Result[Never, str]: ...

    r = await absurd_result(counter())   # Result[T, str]; Err unchanged

THE IMPOSSIBLE BRANCH:
    absurd(value)                    # always raises ImpossibleStateError
"""
