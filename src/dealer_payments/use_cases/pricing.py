"""Pricing steps shared by the finance and lease calculators."""

from __future__ import annotations

from decimal import Decimal

from dealer_payments.domain.dealer_settings import PricingMethod
from dealer_payments.domain.disclaimers import PRICE_UNAVAILABLE
from dealer_payments.domain.errors import CalculationError
from dealer_payments.domain.incentives import override_incentives, sum_incentives
from dealer_payments.domain.model_overrides import ModelOverride
from dealer_payments.domain.payment import ZERO, PaymentBreakdown, PaymentResult, PaymentType
from dealer_payments.domain.rounding import whole_units
from dealer_payments.domain.vehicle import IncentiveType, Vehicle


def ensure_finite_pricing(vehicle: Vehicle) -> None:
    for field_name in ("price", "msrp"):
        value = getattr(vehicle, field_name)
        if value is not None and not value.is_finite():
            raise CalculationError(
                f"Vehicle {field_name} is not a finite number",
                vin=vehicle.vin,
                field=field_name,
            )


def base_price(vehicle: Vehicle, method: PricingMethod) -> Decimal:
    """MSRP, or the selling price (which falls back to MSRP)."""
    if method is PricingMethod.MSRP:
        return vehicle.sticker_price
    return vehicle.selling_price


def applicable_incentives(
    vehicle: Vehicle,
    override: ModelOverride | None,
    calculation_type: IncentiveType,
    include: bool,
) -> Decimal:
    if not include:
        return ZERO
    pool = [*vehicle.eligible_incentives, *override_incentives(override, calculation_type)]
    return sum_incentives(pool, calculation_type)


def deduction(amount: Decimal) -> Decimal:
    """Whole-unit amount shown as a negative breakdown line."""
    return ZERO - whole_units(amount)


def zero_payment_result(
    payment_type: PaymentType, term: int, annual_miles: int | None = None
) -> PaymentResult:
    """Degenerate result for a vehicle without usable pricing."""
    if payment_type is PaymentType.FINANCE:
        breakdown = PaymentBreakdown(trade_value=ZERO, amount_financed=ZERO)
        return PaymentResult(
            type=payment_type,
            payment=ZERO,
            term=term,
            total_at_signing=ZERO,
            incentives_saved=ZERO,
            disclaimer=PRICE_UNAVAILABLE,
            has_manufacturer_rate=False,
            breakdown=breakdown,
            apr=ZERO,
            amount_financed=ZERO,
            total_price=ZERO,
        )

    breakdown = PaymentBreakdown(
        acquisition_fee=ZERO,
        residual_value=ZERO,
        depreciation=ZERO,
        finance_charge=ZERO,
    )
    return PaymentResult(
        type=payment_type,
        payment=ZERO,
        term=term,
        total_at_signing=ZERO,
        incentives_saved=ZERO,
        disclaimer=PRICE_UNAVAILABLE,
        has_manufacturer_rate=False,
        breakdown=breakdown,
        money_factor=ZERO,
        annual_miles=annual_miles,
        residual_value=ZERO,
    )
