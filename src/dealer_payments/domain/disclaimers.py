"""Disclaimer text accompanying every payment estimate."""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal

from dealer_payments.domain.rounding import whole_units


PRICE_UNAVAILABLE = "Price information not available"

_COMMON_TERMS = (
    "Except as otherwise expressly provided, excludes sales tax, title, registration and other fees. "
)


def month_end(today: date) -> date:
    """Last calendar day of today's month; offers are quoted through month end."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=last_day)


def _format_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _money(amount: Decimal) -> str:
    return f"{whole_units(amount):,}"


def finance_disclaimer(
    *,
    payment: Decimal,
    term: int,
    apr: Decimal,
    down_payment: Decimal,
    total_at_signing: Decimal,
    today: date,
    program_name: str | None = None,
) -> str:
    expires = _format_date(month_end(today))
    program = f"Based on {program_name}. " if program_name else ""

    if down_payment > 0:
        opening = (
            f"*Estimated monthly payment of ${payment}/mo based on {term} months at {apr}% APR "
            f"with ${_money(down_payment)} down payment. "
            f"${_money(total_at_signing)} total due at signing. "
        )
    else:
        opening = (
            f"*Estimated monthly payment of ${payment}/mo based on {term} months at {apr}% APR "
            f"with $0 down. "
        )

    return (
        opening
        + _COMMON_TERMS
        + "Actual monthly payments will vary. Does not represent a financing offer or guarantee of credit. "
        + program
        + "Not all buyers will qualify; higher financing rates apply for buyers with lower credit ratings. "
        + f"Payment estimate based on financing programs in effect through {expires}."
    )


def lease_disclaimer(
    *,
    payment: Decimal,
    term: int,
    annual_miles: int,
    total_at_signing: Decimal,
    total_lease_cost: Decimal,
    today: date,
) -> str:
    expires = _format_date(month_end(today))

    return (
        f"*Estimated monthly lease payment of ${payment}/mo for {term} months "
        f"with {annual_miles:,} miles/year. "
        f"${_money(total_at_signing)} total due at lease signing includes "
        f"${_money(total_at_signing - payment)} down payment and fees, first month payment of ${payment}, "
        "and $0 security deposit. "
        f"Total cost to lessee is ${_money(total_lease_cost)} over the lease term. "
        + _COMMON_TERMS
        + "Lessee is responsible for vehicle maintenance, insurance, repairs and charges for excess wear and tear. "
        "Excess mileage charges may apply. Actual monthly payments will vary. "
        "Not all lessees may qualify; higher lease rates apply for lessees with lower credit ratings. "
        f"Payment estimate based on lease programs in effect through {expires}."
    )
