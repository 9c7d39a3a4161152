"""Uniform invocation of sync and async operations."""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Union

Operation = Callable[[], Union[Any, Awaitable[Any]]]


async def call_operation(operation: Operation) -> Any:
    """Run ``operation`` and return its value.

    Coroutine functions are awaited directly; plain callables run in a worker
    thread so a blocking call never stalls the event loop. A plain callable
    that hands back an awaitable has that awaitable awaited as well.
    """
    if inspect.iscoroutinefunction(operation):
        return await operation()
    result = await asyncio.to_thread(operation)
    if inspect.isawaitable(result):
        return await result
    return result
