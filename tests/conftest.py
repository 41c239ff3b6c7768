from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from dealer_payments.domain.dealer_settings import DealerSettings, default_dealer_settings
from dealer_payments.domain.vehicle import Incentive, Vehicle, VehicleBuild


TODAY = date(2026, 10, 18)


@pytest.fixture
def today() -> date:
    """Fixed calendar day; offers in tests are valid through the end of this month."""
    return TODAY


@pytest.fixture
def settings() -> DealerSettings:
    return default_dealer_settings()


@pytest.fixture
def make_vehicle() -> Callable[..., Vehicle]:
    """Factory for inventory vehicles with sensible pricing defaults."""

    def _make(
        vin: str = "1FMSK8DH0TGA00001",
        stock_no: str = "F1001",
        year: int = 2026,
        make: str = "Ford",
        model: str = "Explorer",
        trim: str = "XLT",
        price: Decimal | None = Decimal("33000"),
        msrp: Decimal | None = Decimal("35000"),
        dom: int = 10,
        incentives: tuple[Incentive, ...] = (),
    ) -> Vehicle:
        return Vehicle(
            vin=vin,
            stock_no=stock_no,
            build=VehicleBuild(year=year, make=make, model=model, trim=trim),
            price=price,
            msrp=msrp,
            dom=dom,
            eligible_incentives=incentives,
        )

    return _make
