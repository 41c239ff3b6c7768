from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from dealer_payments.domain.dealer_settings import RoundingMethod


WHOLE_UNIT = Decimal("1")
CENT = Decimal("0.01")

_GRANULARITY: dict[RoundingMethod, Decimal] = {
    RoundingMethod.NEAREST_1: Decimal("1"),
    RoundingMethod.NEAREST_5: Decimal("5"),
    RoundingMethod.NEAREST_10: Decimal("10"),
}


def round_payment(
    amount: Decimal, method: RoundingMethod | str = RoundingMethod.NEAREST_5
) -> Decimal:
    """
    Round a monthly payment to the dealer's display granularity (half-up).

    Only final payment figures go through here; intermediate amounts keep
    full precision.
    """
    granularity = _GRANULARITY[RoundingMethod(method)]
    steps = (amount / granularity).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
    return steps * granularity


def whole_units(amount: Decimal) -> Decimal:
    """Round a display amount to whole currency units (half-up)."""
    return amount.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
