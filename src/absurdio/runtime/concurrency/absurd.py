"""Adapters that re-type never-returning awaitables.

A background service loop is declared ``async def run() -> Never``: it may
fail or suspend forever, but it can not produce a value. Code that collects
tasks of some concrete output type (a group that also holds tasks returning
``Result[Never, E]``, a ``list[asyncio.Task[Foo]]``) can't accept it as-is.
``absurd_future`` wraps it into an awaitable of any output type without
changing how it suspends.

Python has no genuinely empty type. ``typing.Never`` stands in for it in
annotations, and ``absurd()`` is the runtime half of the emulation: the
"impossible branch" that raises ``ImpossibleStateError`` if a value of the
uninhabited type is ever observed.

Example:
    >>> async def heartbeat() -> Never:
    ...     while True:
    ...         await asyncio.sleep(1)
    >>>
    >>> fut: AbsurdFuture[Result[None, str]] = absurd_future(heartbeat())
    >>> task = asyncio.create_task(fut)  # pends exactly like heartbeat()
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Coroutine, Generator
from typing import Any, Generic, Never, ParamSpec, TypeVar

from absurdio.foundation.errors import ImpossibleStateError, Result

T = TypeVar("T")
E = TypeVar("E")
P = ParamSpec("P")


def absurd(value: Never) -> Never:
    """Eliminate a value of the uninhabited type.

    Statically unreachable; at runtime it means a Never-typed computation
    handed back a value anyway, so it always raises.

    Raises:
        ImpossibleStateError: Always
    """
    raise ImpossibleStateError(f"Never witnessed, got {value!r}")


class AbsurdFuture(Coroutine[Any, Any, T], Generic[T]):
    """Coroutine wrapping a never-returning awaitable under an arbitrary output type.

    Each drive step (``send``/``throw``) advances the inner awaitable exactly
    once and hands back whatever it yielded, so the adapter suspends where
    and as often as the inner one does. Exceptions raised by the inner
    awaitable, its failure channel, propagate untouched. Only the success
    arm is adapted: if the inner awaitable finishes, ``absurd`` raises
    instead of completing with a ``T``.

    The output type ``T`` exists for type checkers only and has no runtime
    representation.
    """

    __slots__ = ("_inner", "_driver")

    def __init__(self, inner: Awaitable[Never]) -> None:
        self._inner = inner
        self._driver: Generator[Any, Any, Any] | None = None

    def _started(self) -> Generator[Any, Any, Any]:
        if self._driver is None:
            self._driver = self._inner.__await__()  # type: ignore[assignment]
        return self._driver  # type: ignore[return-value]

    def send(self, value: Any) -> Any:
        """Drive one step. Returns the inner awaitable's suspension signal."""
        driver = self._started()
        try:
            return driver.send(value)
        except StopIteration as stop:
            witnessed = stop.value
        absurd(witnessed)

    def throw(self, typ: Any, val: Any = None, tb: Any = None) -> Any:
        """Throw into the inner awaitable (cancellation arrives here)."""
        driver = self._started()
        try:
            if val is None and tb is None:
                return driver.throw(typ)
            return driver.throw(typ, val, tb)
        except StopIteration as stop:
            witnessed = stop.value
        absurd(witnessed)

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
        elif isinstance(self._inner, Coroutine):
            # never started; close it so it isn't reported as never awaited
            self._inner.close()

    def __await__(self) -> AbsurdFuture[T]:  # type: ignore[override]
        return self

    def __iter__(self) -> AbsurdFuture[T]:
        return self

    def __next__(self) -> Any:
        return self.send(None)

    def __repr__(self) -> str:
        return f"AbsurdFuture({self._inner!r})"


def absurd_future(inner: Awaitable[Never]) -> AbsurdFuture[T]:
    """Wrap a never-returning awaitable so it fits any output type.

    Takes ownership of ``inner`` and does not start it; it runs when the
    returned coroutine is awaited or scheduled. Never fails.

    Example:
        >>> group.spawn(absurd_future(heartbeat()), name="heartbeat")
    """
    return AbsurdFuture(inner)


async def absurd_result(inner: Awaitable[Result[Never, E]]) -> Result[T, E]:
    """Re-type the Ok arm of a ``Result[Never, E]``, passing Err through unchanged.

    For tasks that report failure through a Result instead of raising. An Ok
    arm can only reach ``absurd`` and raises ``ImpossibleStateError``.
    """
    return (await inner).map(absurd)


def never_returns(func: Callable[P, Awaitable[Never]]) -> Callable[P, AbsurdFuture[T]]:
    """Decorator: calling ``func`` yields an ``AbsurdFuture`` instead of a bare coroutine.

    Example:
        >>> @never_returns
        ... async def heartbeat() -> Never:
        ...     while True:
        ...         await asyncio.sleep(1)
        >>> group.spawn(heartbeat())
    """
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> AbsurdFuture[T]:
        return AbsurdFuture(func(*args, **kwargs))
    return wrapper
