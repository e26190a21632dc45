"""Async utilities for running blocking job executions on worker threads."""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Sequence, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


def make_semaphore(max_parallel: int) -> asyncio.Semaphore:
    """Create the concurrency semaphore for one runner pass.

    Must be called inside the event loop that will use it.
    """
    logger.debug("Job semaphore initialized: max_parallel=%d", max_parallel)
    return asyncio.Semaphore(max_parallel)


async def run_sync_limited(
    semaphore: asyncio.Semaphore | None,
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run a synchronous function in a thread pool, bounded by *semaphore*.

    Falls back to unbounded if *semaphore* is None.
    """
    if semaphore is None:
        return await asyncio.to_thread(func, *args, **kwargs)
    async with semaphore:
        return await asyncio.to_thread(func, *args, **kwargs)


async def gather_limited(
    coros: Sequence[Coroutine[Any, Any, T]],
) -> list[T]:
    """Run coroutines concurrently and return results in input order.

    Each coroutine should use run_sync_limited internally.
    Exceptions propagate from the first failure.
    """
    return list(await asyncio.gather(*coros))
