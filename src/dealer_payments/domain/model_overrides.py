from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class FinanceOverride:
    rate: Decimal | None = None
    term: int | None = None
    bonus_cash: Decimal | None = None
    additional_discount: Decimal | None = None
    # When set, the override rate wins over a matching manufacturer rate.
    override_manufacturer_rate: bool = False


@dataclass(frozen=True, slots=True)
class LeaseOverride:
    money_factor: Decimal | None = None
    residual_percentage: Decimal | None = None
    term: int | None = None
    bonus_cash: Decimal | None = None
    additional_discount: Decimal | None = None


@dataclass(frozen=True, slots=True)
class OverrideIncentives:
    cash_back: Decimal | None = None
    dealer_cash: Decimal | None = None
    loyalty_bonus: Decimal | None = None
    trade_in_bonus: Decimal | None = None
    stackable: bool = True


@dataclass(frozen=True, slots=True)
class ModelOverride:
    """Administrator-maintained per-model adjustments, keyed by year/make/model/trim."""

    id: str
    year: int
    make: str
    model: str
    trim: str | None = None
    active: bool = True
    finance: FinanceOverride | None = None
    lease: LeaseOverride | None = None
    incentives: OverrideIncentives | None = None
    notes: str = ""
