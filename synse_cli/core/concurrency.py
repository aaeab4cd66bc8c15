"""
Concurrency Helpers.

Bounded fan-out for per-device remote calls. The composed stack for a single
call is always applied in this order (outside-in):

    Semaphore (gather_bounded) → Timeout (run_with_deadline) → Call

There is no retry layer: a call that fails or times out is reported once.

Usage:
    from synse_cli.core.concurrency import gather_bounded, run_with_deadline

    async def read(record):
        return await run_with_deadline(lambda: client.read(record), timeout=10.0)

    results = await gather_bounded([partial(read, r) for r in records], limit=8)
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from synse_cli.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def run_with_deadline(call: Callable[[], Awaitable[T]], timeout: float | None) -> T:
    """
    Await a call, giving up after `timeout` seconds.

    Raises:
        TimeoutError: If the call does not finish in time.
    """
    if timeout is None:
        return await call()
    async with asyncio.timeout(timeout):
        return await call()


async def gather_bounded(calls: Sequence[Callable[[], Awaitable[T]]], limit: int) -> list[T]:
    """
    Run calls concurrently, at most `limit` at a time.

    Results are returned in the order of `calls`, not completion order.
    The first exception propagates; wrap calls that must not fail.

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def _bounded(call: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await call()

    logger.debug("Fan-out started", calls=len(calls), limit=limit)
    return list(await asyncio.gather(*(_bounded(call) for call in calls)))
