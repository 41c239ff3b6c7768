from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from dealer_payments.domain.dealer_settings import CreditTier, DealerSettings
from dealer_payments.domain.errors import ValidationError
from dealer_payments.domain.rates import RateSource
from dealer_payments.domain.vehicle import Vehicle


ZERO = Decimal("0")


class InvalidPaymentInput(ValidationError):
    pass


class PaymentType(str, Enum):
    FINANCE = "finance"
    LEASE = "lease"


@dataclass(frozen=True, slots=True)
class PaymentBreakdown:
    """
    Intermediate amounts behind a payment, rounded to whole currency units.

    Deductions (incentives, down payment, trade value) are reported as
    negative numbers.
    """

    vehicle_price: Decimal = ZERO
    incentives: Decimal = ZERO
    sale_price: Decimal = ZERO
    doc_fee: Decimal = ZERO
    electronic_filing: Decimal = ZERO
    sales_tax: Decimal = ZERO
    total_amount: Decimal = ZERO
    down_payment: Decimal = ZERO
    trade_value: Decimal | None = None
    amount_financed: Decimal | None = None
    acquisition_fee: Decimal | None = None
    residual_value: Decimal | None = None
    depreciation: Decimal | None = None
    finance_charge: Decimal | None = None


@dataclass(frozen=True, slots=True)
class PaymentResult:
    type: PaymentType
    payment: Decimal
    term: int
    total_at_signing: Decimal
    incentives_saved: Decimal
    disclaimer: str
    has_manufacturer_rate: bool
    breakdown: PaymentBreakdown
    rate_source: RateSource | None = None
    apr: Decimal | None = None
    money_factor: Decimal | None = None
    annual_miles: int | None = None
    residual_value: Decimal | None = None
    amount_financed: Decimal | None = None
    total_price: Decimal | None = None


@dataclass(frozen=True, slots=True)
class BulkCalculationResult:
    vin: str
    stock_number: str
    success: bool
    payment: Decimal | None = None
    total_at_signing: Decimal | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class BatchSummary:
    total: int
    successful: int
    failed: int
    average_payment: Decimal
    results: list[BulkCalculationResult] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PaymentParameters:
    """
    Caller-supplied knobs shared by single and bulk calculations.

    Unset values fall back to the dealer settings snapshot (and model
    overrides) at calculation time.
    """

    down_payment: Decimal | None = None
    trade_value: Decimal = ZERO
    term: int | None = None
    credit_tier: CreditTier | None = None
    annual_miles: int | None = None
    include_incentives: bool = True

    def validate(self) -> None:
        errors: list[dict[str, str]] = []
        if self.down_payment is not None and self.down_payment < 0:
            errors.append({"field": "down_payment", "message": "down_payment must be >= 0"})
        if self.trade_value < 0:
            errors.append({"field": "trade_value", "message": "trade_value must be >= 0"})
        if self.term is not None and self.term <= 0:
            errors.append({"field": "term", "message": "term must be > 0"})
        if self.annual_miles is not None and self.annual_miles <= 0:
            errors.append({"field": "annual_miles", "message": "annual_miles must be > 0"})
        if errors:
            raise InvalidPaymentInput(errors=errors)


@dataclass(frozen=True, slots=True)
class PaymentRequest:
    vehicle: Vehicle
    settings: DealerSettings
    params: PaymentParameters = field(default_factory=PaymentParameters)

    def validate(self) -> None:
        self.params.validate()
