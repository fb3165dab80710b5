"""Best-effort callback invocation.

Job callbacks are opaque: they may return a value, an awaitable, or raise.
Whatever happens, the outcome is discarded and never reaches the scheduler,
so one broken callback cannot take down its job or its siblings.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from collections.abc import Awaitable
from typing import Any, Callable

Callback = Callable[[], Any]

# Strong references to awaitables scheduled on a caller's running loop
_pending: set[asyncio.Task[Any]] = set()


async def _wait_for(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _forget(task: asyncio.Task[Any]) -> None:
    _pending.discard(task)
    if not task.cancelled():
        # retrieve, so the loop does not report an unhandled exception
        task.exception()


def resolve(result: Any) -> Any:
    """Drive *result* to completion if it is awaitable, else return it as is."""
    if inspect.isawaitable(result):
        return asyncio.run(_wait_for(result))
    return result


def invoke(callback: Callback | None) -> None:
    """Call *callback*, await its result if needed, and discard any error.

    On an executor worker thread there is no event loop, so awaitables get a
    fresh one via :func:`asyncio.run`. When called from inside a running loop
    the awaitable is scheduled on that loop as a task instead.
    """
    if callback is None:
        return
    with contextlib.suppress(Exception):
        result = callback()
        if not inspect.isawaitable(result):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(_wait_for(result))
            return
        task = loop.create_task(_wait_for(result))
        _pending.add(task)
        task.add_done_callback(_forget)
