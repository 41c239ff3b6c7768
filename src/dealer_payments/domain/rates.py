from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from dealer_payments.domain.vehicle import IncentiveType


class RateSource(str, Enum):
    MANUFACTURER = "manufacturer"
    MODEL_OVERRIDE = "model_override"
    MODEL_FALLBACK = "model_fallback"
    MAKE_TABLE = "make_table"
    DEALER_CUSTOM = "dealer_custom"
    DEALER_DEFAULT = "dealer_default"


@dataclass(frozen=True, slots=True)
class ManufacturerRateRecord:
    """
    One normalized manufacturer incentive offer.

    term is the maximum eligible term unless offer_headline states a range.
    An empty trim acts as a wildcard.
    """

    year: str
    make: str
    model: str
    incentive_type: IncentiveType
    rate: Decimal  # APR percent
    term: int
    valid_through: date
    valid_from: date | None = None
    trim: str = ""
    offer_headline: str = ""
    title: str = ""
    disclaimer: str = ""
    program_name: str = ""
    expiration_date: str = ""


@dataclass(frozen=True, slots=True)
class RateMatch:
    rate: Decimal
    term: int
    disclaimer: str
    program_name: str
    expiration_date: str


@dataclass(frozen=True, slots=True)
class ResolvedRate:
    """
    Outcome of walking a fallback chain.

    value is always numeric; match is populated only when the value came
    from the manufacturer feed.
    """

    value: Decimal
    source: RateSource
    match: RateMatch | None = None

    @property
    def is_manufacturer(self) -> bool:
        return self.source is RateSource.MANUFACTURER
