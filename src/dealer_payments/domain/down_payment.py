from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from dealer_payments.domain.dealer_settings import (
    DownPaymentConfig,
    DownPaymentType,
    PricingMethod,
)
from dealer_payments.domain.vehicle import Vehicle


def resolve_down_payment(
    config: DownPaymentConfig | None,
    vehicle: Vehicle,
    default: Decimal,
) -> Decimal:
    """
    Turn a fixed-or-percentage down payment policy into an amount.

    Percentage policies apply to MSRP or to the selling price (which itself
    falls back to MSRP) per config.based_on. Without a policy the flat default
    applies. The result is never negative.
    """
    if config is None:
        amount = default
    elif config.type is DownPaymentType.PERCENTAGE:
        basis = (
            vehicle.sticker_price
            if config.based_on is PricingMethod.MSRP
            else vehicle.selling_price
        )
        amount = (basis * config.value / Decimal("100")).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
    else:
        amount = config.value

    return max(amount, Decimal("0"))
