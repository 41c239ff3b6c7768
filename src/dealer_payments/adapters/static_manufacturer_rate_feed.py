from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal
from typing import Callable

from dealer_payments.domain.rates import ManufacturerRateRecord
from dealer_payments.domain.vehicle import IncentiveType
from dealer_payments.ports.manufacturer_rate_feed import ManufacturerRateFeed


_CREDIT_DISCLAIMER = "Not all buyers will qualify for Ford Credit financing."

# (model, apr, max term, headline, program)
_SAMPLE_OFFERS: tuple[tuple[str, str, int, str, str], ...] = (
    ("F-150 F-150", "1.9", 48, "Public Offers", ""),
    ("Mustang", "3.9", 36, "Public Offers", ""),
    ("Transit Chassis", "6.9", 48, "Public Offers", ""),
    ("Explorer", "3.9", 60, "3.9% APR for up to 60 Months", "Ford Credit Special APR"),
    ("Escape", "2.9", 60, "2.9% APR for up to 60 Months", "Ford Credit Special APR"),
    ("Bronco", "5.9", 72, "5.9% APR for up to 72 Months", "Ford Credit Special APR"),
    ("Edge", "3.9", 60, "3.9% APR for up to 60 Months", "Ford Credit Special APR"),
)


def sample_rate_records(today: date) -> list[ManufacturerRateRecord]:
    """Representative Ford finance offers, valid through the end of today's month."""
    valid_through = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    return [
        ManufacturerRateRecord(
            year=str(today.year),
            make="Ford",
            model=model,
            incentive_type=IncentiveType.FINANCE,
            rate=Decimal(apr),
            term=term,
            valid_from=today.replace(day=1),
            valid_through=valid_through,
            offer_headline=headline,
            title=f"{apr}% APR Financing",
            disclaimer=(
                f"{apr}% APR for up to {term} months on select {today.year} Ford {model.split()[0]} "
                f"models. {_CREDIT_DISCLAIMER}"
            ),
            program_name=program,
            expiration_date=valid_through.strftime("%m/%d/%Y"),
        )
        for model, apr, term, headline, program in _SAMPLE_OFFERS
    ]


class StaticManufacturerRateFeed(ManufacturerRateFeed):
    """
    In-process feed serving a fixed record set.

    Used as the fallback source when the live feed is unreachable, and as a
    deterministic fixture in tests. Records are filtered by make.
    """

    def __init__(
        self,
        records: list[ManufacturerRateRecord] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._records = records
        self._today = today

    async def fetch_rates(self, make: str) -> list[ManufacturerRateRecord]:
        records = self._records if self._records is not None else sample_rate_records(self._today())
        return [r for r in records if r.make.lower() == make.lower()]
