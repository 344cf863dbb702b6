"""Async bridge for running blocking store operations from MCP handlers."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a synchronous function in a worker thread.

    Store reads and writes are blocking filesystem calls; running them
    through this keeps the MCP event loop responsive.

    Example:
        rows = await run_sync(config_status, active, target, options)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
