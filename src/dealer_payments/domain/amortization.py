from __future__ import annotations

from decimal import Decimal


ONE = Decimal("1")
MONTHS_PER_YEAR = Decimal("12")
MONEY_FACTOR_DIVISOR = Decimal("2400")


def monthly_rate(apr_percent: Decimal) -> Decimal:
    """Convert an APR expressed in percent to a monthly periodic rate."""
    return apr_percent / Decimal("100") / MONTHS_PER_YEAR


def level_payment(principal: Decimal, apr_percent: Decimal, term_months: int) -> Decimal:
    """
    Level monthly payment for a fully amortizing loan, at full precision.

    Standard amortized loan payment:
    payment = P * (r*(1+r)^n) / ((1+r)^n - 1)
    with r = APR / 100 / 12. A zero rate degenerates to P / n.
    """
    rate = monthly_rate(apr_percent)
    if rate == 0:
        return principal / Decimal(term_months)

    factor = (ONE + rate) ** term_months
    return principal * (rate * factor) / (factor - ONE)


def apr_to_money_factor(apr_percent: Decimal) -> Decimal:
    return apr_percent / MONEY_FACTOR_DIVISOR
