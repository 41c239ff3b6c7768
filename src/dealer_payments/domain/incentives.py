from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from dealer_payments.domain.model_overrides import ModelOverride
from dealer_payments.domain.vehicle import Incentive, IncentiveType


def sum_incentives(
    incentives: Iterable[Incentive], calculation_type: IncentiveType | str
) -> Decimal:
    """
    Total the incentives that apply to a calculation.

    An incentive applies when its type is the calculation type or cash, and it
    is not explicitly marked non-stackable.
    """
    wanted = IncentiveType(calculation_type)
    return sum(
        (
            incentive.amount
            for incentive in incentives
            if incentive.type in (wanted, IncentiveType.CASH) and incentive.stackable is not False
        ),
        Decimal("0"),
    )


def override_incentives(
    override: ModelOverride | None, calculation_type: IncentiveType
) -> list[Incentive]:
    """Expand a model override's bonus cash, discounts and general incentives."""
    if override is None:
        return []

    found: list[Incentive] = []

    if calculation_type is IncentiveType.FINANCE and override.finance is not None:
        adjustments = {
            "bonus_cash": override.finance.bonus_cash,
            "additional_discount": override.finance.additional_discount,
        }
    elif calculation_type is IncentiveType.LEASE and override.lease is not None:
        adjustments = {
            "bonus_cash": override.lease.bonus_cash,
            "additional_discount": override.lease.additional_discount,
        }
    else:
        adjustments = {}

    for name, amount in adjustments.items():
        if amount:
            found.append(
                Incentive(
                    id=f"{override.id}:{calculation_type.value}:{name}",
                    type=calculation_type,
                    name=name.replace("_", " ").title(),
                    amount=amount,
                )
            )

    general = override.incentives
    if general is not None:
        for name in ("cash_back", "dealer_cash", "loyalty_bonus", "trade_in_bonus"):
            amount = getattr(general, name)
            if amount:
                found.append(
                    Incentive(
                        id=f"{override.id}:{name}",
                        type=IncentiveType.CASH,
                        name=name.replace("_", " ").title(),
                        amount=amount,
                        stackable=general.stackable,
                    )
                )

    return found
