"""Fixed-size batching for outbound lookups. Caps requests in flight at batch_size."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import TypeVar

import structlog

K = TypeVar("K")
V = TypeVar("V")

log = structlog.get_logger(__name__)


def chunked(items: Sequence[K], size: int) -> Iterator[Sequence[K]]:
    """Consecutive slices of at most size items."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    for i in range(0, len(items), size):
        yield items[i : i + size]


async def gather_in_batches(
    keys: Sequence[K],
    op: Callable[[K], Awaitable[V]],
    *,
    batch_size: int = 10,
    timeout: float | None = None,
) -> dict[K, V]:
    """
    Run op(key) for every key, batch_size at a time. Batches run one after
    another; within a batch all ops run concurrently and the batch settles
    (every op finished, failed or timed out) before the next starts.
    Each op gets its own timeout. Failed or timed-out keys are absent from the
    result; they never cancel sibling ops.
    """
    results: dict[K, V] = {}
    for batch in chunked(keys, batch_size):
        if timeout is not None:
            aws = [asyncio.wait_for(op(k), timeout=timeout) for k in batch]
        else:
            aws = [op(k) for k in batch]
        settled = await asyncio.gather(*aws, return_exceptions=True)
        for key, outcome in zip(batch, settled):
            if isinstance(outcome, BaseException):
                log.warning("batch_op_failed", key=key, error=str(outcome) or type(outcome).__name__)
                continue
            results[key] = outcome
    return results
