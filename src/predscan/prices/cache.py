"""Process-wide live price cache with time-based invalidation."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

import structlog

from predscan.models.price import LivePrices

log = structlog.get_logger(__name__)


class PriceCache:
    """
    Holds (value, timestamp). A value younger than ttl_sec is served as-is;
    otherwise the next caller refreshes it. Callers arriving during a refresh
    await the same in-flight task instead of fetching again.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[LivePrices]],
        ttl_sec: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._value: LivePrices | None = None
        self._ts: float = 0.0
        self._inflight: asyncio.Task[LivePrices] | None = None

    def fresh(self) -> bool:
        return self._value is not None and (self._clock() - self._ts) < self.ttl_sec

    async def get(self) -> LivePrices:
        if self.fresh():
            return self._value  # type: ignore[return-value]
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh())
        task = self._inflight
        try:
            return await asyncio.shield(task)
        finally:
            if task.done() and self._inflight is task:
                self._inflight = None

    async def _refresh(self) -> LivePrices:
        started = self._clock()
        value = await self._fetch()
        self._value, self._ts = value, started
        log.debug("prices_refreshed", assets=sorted(value.quotes))
        return value
