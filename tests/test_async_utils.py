"""
Tests for async_utils module.

Covers make_semaphore, run_sync_limited and gather_limited.
"""

import asyncio
import threading
import time

from publishing_sync.core.async_utils import (
    gather_limited,
    make_semaphore,
    run_sync_limited,
)


def _sync_add(a: int, b: int) -> int:
    """Simple sync function for testing."""
    return a + b


async def test_make_semaphore_value():
    semaphore = make_semaphore(3)
    assert isinstance(semaphore, asyncio.Semaphore)
    for _ in range(3):
        await semaphore.acquire()
    assert semaphore.locked()


async def test_run_sync_limited_returns_result():
    result = await run_sync_limited(make_semaphore(2), _sync_add, 10, 20)
    assert result == 30


async def test_run_sync_limited_without_semaphore():
    """Falls back to unbounded when semaphore is None."""
    result = await run_sync_limited(None, _sync_add, 1, 2)
    assert result == 3


async def test_run_sync_limited_passes_kwargs():
    def _kw_func(*, name: str) -> str:
        return f"hello {name}"

    result = await run_sync_limited(None, _kw_func, name="world")
    assert result == "hello world"


async def test_runs_off_the_event_loop_thread():
    loop_thread = threading.get_ident()
    worker_thread = await run_sync_limited(None, threading.get_ident)
    assert worker_thread != loop_thread


async def test_gather_limited_preserves_order():
    semaphore = make_semaphore(2)
    results = await gather_limited(
        [run_sync_limited(semaphore, _sync_add, i, i) for i in range(5)]
    )
    assert results == [0, 2, 4, 6, 8]


async def test_gather_limited_bounds_concurrency():
    semaphore = make_semaphore(2)
    lock = threading.Lock()
    active = 0
    peak = 0

    def _work():
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1

    await gather_limited(
        [run_sync_limited(semaphore, _work) for _ in range(6)]
    )

    assert peak <= 2


async def test_gather_limited_empty():
    assert await gather_limited([]) == []
