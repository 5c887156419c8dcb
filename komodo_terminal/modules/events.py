"""Callback dispatch shared by the channel and execution modules."""

import inspect
from typing import Any, Callable, Optional


async def dispatch(callback: Optional[Callable[..., Any]], *args: Any) -> Any:
    """
    Invoke an optional callback, awaiting it if it returns an awaitable.

    Lets callers pass plain functions or coroutine functions interchangeably.
    """
    if callback is None:
        return None
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
