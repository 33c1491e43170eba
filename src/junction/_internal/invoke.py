"""Resolve helpers - treat plain values and awaitables uniformly.

A producer can hand back a ``Response`` or something that will become
one (a coroutine, a Future). Code that needs the final value awaits
through this one helper so the check lives in exactly one place.

Usage::

    from junction._internal.invoke import resolve

    response = await resolve(router.handler(request, info))
"""

import asyncio
import inspect
from collections.abc import Coroutine, Generator
from typing import Any


async def resolve(result: Any) -> Any:
    """Return *result*, awaiting it first if it is awaitable."""
    if inspect.isawaitable(result):
        result = await result
    return result


class SharedAwaitable:
    """Wrap a coroutine so it can be awaited any number of times.

    A coroutine object runs once; the first await schedules it as a
    Task and every await, concurrent or later, waits on that Task and
    gets the same result (or the same exception).
    """

    __slots__ = ("_coro", "_task")

    def __init__(self, coro: Coroutine[Any, Any, Any]) -> None:
        self._coro = coro
        self._task: asyncio.Future[Any] | None = None

    def __await__(self) -> Generator[Any, None, Any]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._coro)
        return self._task.__await__()

    def __repr__(self) -> str:
        state = "pending" if self._task is None or not self._task.done() else "done"
        return f"<SharedAwaitable {self._coro.__qualname__} {state}>"
