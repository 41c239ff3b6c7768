"""
Tests for ManufacturerRateCache: TTL, single-flight refresh, fallback policy.
"""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from dealer_payments.adapters.static_manufacturer_rate_feed import StaticManufacturerRateFeed
from dealer_payments.domain.rates import ManufacturerRateRecord
from dealer_payments.domain.vehicle import IncentiveType
from dealer_payments.infra.rate_cache import ManufacturerRateCache
from dealer_payments.ports.manufacturer_rate_feed import ManufacturerRateFeed


def _record(rate: str) -> ManufacturerRateRecord:
    return ManufacturerRateRecord(
        year="2026",
        make="Ford",
        model="Explorer",
        incentive_type=IncentiveType.FINANCE,
        rate=Decimal(rate),
        term=60,
        valid_through=date(2026, 10, 31),
    )


class FakeFeed(ManufacturerRateFeed):
    """Scriptable feed: returns/raises the queued outcomes in order."""

    def __init__(self, *outcomes, delay: float = 0.0) -> None:
        self.outcomes = list(outcomes)
        self.delay = delay
        self.calls = 0
        self.release: asyncio.Event | None = None

    async def fetch_rates(self, make: str) -> list[ManufacturerRateRecord]:
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if self.release is not None:
            await self.release.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


# ==============================================================================
# Cache Hits
# ==============================================================================


@pytest.mark.asyncio
async def test_fresh_entry_is_served_from_cache(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")])
    cache = ManufacturerRateCache(feed, ttl_seconds=60, clock=clock)

    first = await cache.fetch_rates("Ford")
    clock.now = 59
    second = await cache.fetch_rates("FORD")

    assert first == second == [_record("3.9")]
    assert feed.calls == 1


@pytest.mark.asyncio
async def test_expired_entry_is_refreshed(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")], [_record("2.9")])
    cache = ManufacturerRateCache(feed, ttl_seconds=60, clock=clock)

    await cache.fetch_rates("Ford")
    clock.now = 61
    refreshed = await cache.fetch_rates("Ford")

    assert refreshed == [_record("2.9")]
    assert feed.calls == 2


@pytest.mark.asyncio
async def test_invalidate_forces_refetch(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")])
    cache = ManufacturerRateCache(feed, ttl_seconds=60, clock=clock)

    await cache.fetch_rates("Ford")
    cache.invalidate("ford")
    await cache.fetch_rates("Ford")
    cache.invalidate()
    await cache.fetch_rates("Ford")

    assert feed.calls == 3


# ==============================================================================
# Single-flight
# ==============================================================================


@pytest.mark.asyncio
async def test_concurrent_cold_callers_share_one_fetch(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")], delay=0.01)
    cache = ManufacturerRateCache(feed, clock=clock)

    results = await asyncio.gather(*(cache.fetch_rates("Ford") for _ in range(5)))

    assert feed.calls == 1
    assert all(r == [_record("3.9")] for r in results)


@pytest.mark.asyncio
async def test_stale_entry_served_while_refresh_in_flight(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")], [_record("2.9")])
    cache = ManufacturerRateCache(feed, ttl_seconds=60, clock=clock)
    await cache.fetch_rates("Ford")

    clock.now = 61
    feed.release = asyncio.Event()
    refresh = asyncio.create_task(cache.fetch_rates("Ford"))
    while feed.calls < 2:
        await asyncio.sleep(0)

    during = await cache.fetch_rates("Ford")
    feed.release.set()
    after = await refresh

    assert during == [_record("3.9")]
    assert after == [_record("2.9")]
    assert feed.calls == 2


# ==============================================================================
# Failure Policy
# ==============================================================================


@pytest.mark.asyncio
async def test_failure_with_stale_entry_serves_stale(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")], RuntimeError("feed down"))
    cache = ManufacturerRateCache(feed, ttl_seconds=60, clock=clock)

    await cache.fetch_rates("Ford")
    clock.now = 61
    records = await cache.fetch_rates("Ford")

    assert records == [_record("3.9")]


@pytest.mark.asyncio
async def test_cold_failure_uses_fallback_feed(clock: FakeClock, today: date) -> None:
    feed = FakeFeed(RuntimeError("feed down"))
    fallback = StaticManufacturerRateFeed(today=lambda: today)
    cache = ManufacturerRateCache(feed, fallback_feed=fallback, clock=clock)

    records = await cache.fetch_rates("Ford")

    assert records
    assert all(r.make == "Ford" for r in records)


@pytest.mark.asyncio
async def test_cold_failure_without_fallback_is_empty(clock: FakeClock) -> None:
    cache = ManufacturerRateCache(FakeFeed(RuntimeError("feed down")), clock=clock)

    assert await cache.fetch_rates("Ford") == []


@pytest.mark.asyncio
async def test_timeout_falls_back(clock: FakeClock) -> None:
    feed = FakeFeed([_record("3.9")], delay=1.0)
    fallback = StaticManufacturerRateFeed(records=[_record("6.9")])
    cache = ManufacturerRateCache(feed, fallback_feed=fallback, timeout_seconds=0.01, clock=clock)

    records = await cache.fetch_rates("Ford")

    assert records == [_record("6.9")]


@pytest.mark.asyncio
async def test_failure_is_logged(clock: FakeClock, caplog: pytest.LogCaptureFixture) -> None:
    cache = ManufacturerRateCache(FakeFeed(RuntimeError("feed down")), clock=clock)

    with caplog.at_level("WARNING"):
        await cache.fetch_rates("Ford")

    assert "using fallback rates" in caplog.text
    assert caplog.records[0].error_type == "RuntimeError"
