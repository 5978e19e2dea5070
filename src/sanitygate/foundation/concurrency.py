"""Bounded fan-out helpers for the scan engine.

File reads and stats are blocking calls; they run in worker threads through a
``BoundedPool`` so a large tree never opens thousands of descriptors at once.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Final, TypeVar

T = TypeVar("T")
I = TypeVar("I")
R = TypeVar("R")


class TimedOut:
    """Outcome marker for an awaitable that missed its deadline."""

    __slots__ = ("seconds",)

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    def __repr__(self) -> str:
        return f"TimedOut(seconds={self.seconds})"


@dataclass(slots=True)
class BoundedPool:
    """Semaphore-backed map with a fixed concurrency limit.

    Usage:
        pool = BoundedPool(limit=50)
        contents = await pool.map(read_file, paths)

    Results come back in input order regardless of completion order.
    """

    limit: int
    _semaphore: asyncio.Semaphore = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")
        self._semaphore = asyncio.Semaphore(self.limit)

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        async with self._semaphore:
            return await fn()

    async def map(
        self,
        fn: Callable[[I], Awaitable[R]],
        items: Iterable[I],
    ) -> list[R]:
        """Apply an async function to every item, at most ``limit`` at a time.

        The first exception raised by ``fn`` propagates after all tasks
        settle. Callers that want per-item failure isolation catch inside
        ``fn``.
        """
        async def bounded(item: I) -> R:
            async with self._semaphore:
                return await fn(item)

        results = await asyncio.gather(
            *(bounded(item) for item in items),
            return_exceptions=True,
        )
        for r in results:
            if isinstance(r, BaseException):
                raise r
        return list(results)

    async def map_blocking(
        self,
        fn: Callable[[I], R],
        items: Iterable[I],
    ) -> list[R]:
        """Like ``map`` for a blocking function, run via ``asyncio.to_thread``."""
        async def threaded(item: I) -> R:
            return await asyncio.to_thread(fn, item)

        return await self.map(threaded, items)


async def run_with_timeout(aw: Awaitable[T], timeout: float) -> T | TimedOut:
    """Await ``aw`` for at most ``timeout`` seconds.

    On expiry the awaitable is cancelled and its eventual result discarded.
    Work already handed to a worker thread runs to its own deadline.

    Returns:
        The awaitable's result, or ``TimedOut`` when the deadline passed.
    """
    try:
        return await asyncio.wait_for(aw, timeout=timeout)
    except TimeoutError:
        return TimedOut(timeout)



DEFAULT_READ_LIMIT: Final = 50
DEFAULT_STAT_LIMIT: Final = 150
