from __future__ import annotations

from datetime import date
from typing import Callable

from dealer_payments.domain.dealer_settings import CreditTier, DealerSettings
from dealer_payments.domain.model_overrides import ModelOverride
from dealer_payments.domain.rate_matching import find_best_rate
from dealer_payments.domain.rate_resolution import (
    resolve_finance_rate,
    resolve_money_factor,
    resolve_residual_percent,
)
from dealer_payments.domain.rates import RateMatch, ResolvedRate
from dealer_payments.domain.vehicle import Vehicle
from dealer_payments.ports.manufacturer_rate_feed import ManufacturerRateFeed


class RateResolver:
    """
    Resolves the rate inputs for one calculation.

    Responsibilities:
    - Pull manufacturer records for the vehicle's make from the feed port
    - Match the vehicle/term against them (lowest valid rate wins)
    - Walk the override -> table -> dealer default chain when nothing matches

    Holds no per-call state; everything learned about a call is returned in a
    ResolvedRate.
    """

    def __init__(
        self,
        rate_feed: ManufacturerRateFeed | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize resolver with dependencies.

        Args:
            rate_feed: Manufacturer rate source (normally the shared rate cache);
                None disables manufacturer matching
            today: Clock used for offer validity checks
        """
        self._rate_feed = rate_feed
        self._today = today

    async def find_best_rate(self, vehicle: Vehicle, term: int) -> RateMatch | None:
        if self._rate_feed is None:
            return None
        records = await self._rate_feed.fetch_rates(vehicle.build.make)
        return find_best_rate(records, vehicle, term, self._today())

    async def finance_rate(
        self,
        vehicle: Vehicle,
        term: int,
        credit_tier: CreditTier,
        settings: DealerSettings,
        override: ModelOverride | None,
    ) -> ResolvedRate:
        match = None
        if settings.finance.use_manufacturer_rates:
            match = await self.find_best_rate(vehicle, term)

        return resolve_finance_rate(
            build=vehicle.build,
            credit_tier=credit_tier,
            finance=settings.finance,
            override=override,
            manufacturer_match=match,
        )

    async def money_factor(
        self,
        vehicle: Vehicle,
        term: int,
        settings: DealerSettings,
        override: ModelOverride | None,
    ) -> ResolvedRate:
        match = None
        if settings.finance.use_manufacturer_rates:
            match = await self.find_best_rate(vehicle, term)

        return resolve_money_factor(
            build=vehicle.build,
            term=term,
            lease=settings.lease,
            override=override,
            manufacturer_match=match,
        )

    def residual_percent(
        self,
        vehicle: Vehicle,
        term: int,
        settings: DealerSettings,
        override: ModelOverride | None,
    ) -> ResolvedRate:
        return resolve_residual_percent(
            build=vehicle.build,
            term=term,
            lease=settings.lease,
            override=override,
        )
