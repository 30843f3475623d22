"""Invoke helpers: call sync or async collaborators uniformly.

Document clients can be plain functions or coroutines. Blocking
callables run on a worker thread so a slow backend never stalls the
event loop. The sync/async check lives here and nowhere else.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(client.index, index_request)
"""

import functools
import inspect
from typing import Any

import anyio


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and return its result, awaiting if needed.

    Coroutine functions are awaited on the current event loop. Anything
    else runs via ``anyio.to_thread.run_sync``; if that returns an
    awaitable, it is awaited too.
    """
    if inspect.iscoroutinefunction(func):
        return await func(*args, **kwargs)
    result = await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result
