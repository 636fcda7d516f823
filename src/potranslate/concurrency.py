import asyncio
import collections
from typing import Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    if size <= 0:
        raise ValueError(f"Chunk size must be a positive integer, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def run_bounded(
    items: Sequence[T], concurrency: int, fn: Callable[[T], Awaitable[None]]
) -> None:
    """
    Process items with at most `concurrency` workers pulling from a shared queue.

    Exceptions raised by `fn` are not handled here.
    """
    queue = collections.deque(items)

    async def worker() -> None:
        while queue:
            item = queue.popleft()
            await fn(item)

    workers = min(concurrency, len(queue))
    if workers <= 0:
        return
    await asyncio.gather(*(worker() for _ in range(workers)))
