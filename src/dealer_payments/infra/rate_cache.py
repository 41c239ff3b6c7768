"""
Shared manufacturer-rate cache.

One entry per make, refreshed after a TTL. A refresh is single-flight per
make: while one caller fetches, others either wait on that fetch (cold cache)
or are served the stale entry. A failed or timed-out fetch never surfaces to
callers; they get the stale entry, or the fallback feed's records when nothing
was ever cached.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from dealer_payments.domain.rates import ManufacturerRateRecord
from dealer_payments.ports.manufacturer_rate_feed import ManufacturerRateFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    records: list[ManufacturerRateRecord]
    fetched_at: float


class ManufacturerRateCache(ManufacturerRateFeed):
    """Caching, single-flight decorator around a live feed."""

    def __init__(
        self,
        feed: ManufacturerRateFeed,
        fallback_feed: ManufacturerRateFeed | None = None,
        ttl_seconds: float = 3600,
        timeout_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._feed = feed
        self._fallback_feed = fallback_feed
        self._ttl = ttl_seconds
        self._timeout = timeout_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _is_fresh(self, entry: _CacheEntry | None) -> bool:
        return entry is not None and self._clock() - entry.fetched_at < self._ttl

    async def fetch_rates(self, make: str) -> list[ManufacturerRateRecord]:
        key = make.strip().lower()
        entry = self._entries.get(key)
        if self._is_fresh(entry):
            return entry.records

        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked() and entry is not None:
            # A refresh is already in flight; serve what we have
            return entry.records

        async with lock:
            entry = self._entries.get(key)
            if self._is_fresh(entry):
                return entry.records
            return await self._refresh(key, make, entry)

    async def _refresh(
        self, key: str, make: str, stale: _CacheEntry | None
    ) -> list[ManufacturerRateRecord]:
        try:
            records = await asyncio.wait_for(self._feed.fetch_rates(make), timeout=self._timeout)
        except Exception as exc:
            records = await self._recover(make, stale, exc)

        self._entries[key] = _CacheEntry(records=records, fetched_at=self._clock())
        logger.info(
            "Manufacturer rates available",
            extra={"make": make, "count": len(records)},
        )
        return records

    async def _recover(
        self, make: str, stale: _CacheEntry | None, exc: Exception
    ) -> list[ManufacturerRateRecord]:
        if stale is not None:
            logger.warning(
                "Rate feed fetch failed, serving stale rates",
                extra={"make": make, "error_type": type(exc).__name__, "error_message": str(exc)},
            )
            return stale.records

        logger.warning(
            "Rate feed fetch failed, using fallback rates",
            extra={"make": make, "error_type": type(exc).__name__, "error_message": str(exc)},
        )
        if self._fallback_feed is None:
            return []
        return await self._fallback_feed.fetch_rates(make)

    def invalidate(self, make: str | None = None) -> None:
        """Drop one make's entry, or every entry when make is None."""
        if make is None:
            self._entries.clear()
        else:
            self._entries.pop(make.strip().lower(), None)
