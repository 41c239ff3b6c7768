from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from dealer_payments.domain.amortization import level_payment
from dealer_payments.domain.disclaimers import finance_disclaimer
from dealer_payments.domain.down_payment import resolve_down_payment
from dealer_payments.domain.payment import (
    ZERO,
    PaymentBreakdown,
    PaymentRequest,
    PaymentResult,
    PaymentType,
)
from dealer_payments.domain.rate_resolution import find_model_override
from dealer_payments.domain.rounding import round_payment, whole_units
from dealer_payments.domain.vehicle import IncentiveType
from dealer_payments.use_cases.pricing import (
    applicable_incentives,
    base_price,
    deduction,
    ensure_finite_pricing,
    zero_payment_result,
)
from dealer_payments.use_cases.resolve_rate import RateResolver

logger = logging.getLogger(__name__)


class CalculateFinancePayment:
    """
    Estimate an amortized finance payment for one vehicle.

    Rounding policy:
    - All intermediate amounts keep full Decimal precision
    - Only the monthly payment is rounded, to the dealer's display granularity
    - Breakdown figures are rounded to whole units for display; APR is not

    A vehicle without usable pricing yields a zero payment with an explanatory
    disclaimer instead of an error.
    """

    def __init__(
        self,
        rate_resolver: RateResolver,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._rate_resolver = rate_resolver
        self._today = today

    async def execute(self, request: PaymentRequest) -> PaymentResult:
        request.validate()

        vehicle = request.vehicle
        settings = request.settings
        params = request.params
        finance = settings.finance
        fees = settings.fees

        ensure_finite_pricing(vehicle)
        override = find_model_override(settings.model_overrides, vehicle.build)

        override_term = (
            override.finance.term if override is not None and override.finance is not None else None
        )
        term = params.term or override_term or finance.default_term
        credit_tier = params.credit_tier or finance.default_credit_tier

        down_payment = params.down_payment
        if down_payment is None:
            down_payment = resolve_down_payment(
                finance.down_payment, vehicle, finance.default_down_payment
            )

        vehicle_price = base_price(vehicle, finance.pricing_method)
        if vehicle_price <= 0:
            return zero_payment_result(PaymentType.FINANCE, term)

        incentives = applicable_incentives(
            vehicle, override, IncentiveType.FINANCE, params.include_incentives
        )
        sale_price = vehicle_price - incentives

        taxable_amount = sale_price + fees.fixed_fees
        sales_tax = taxable_amount * fees.tax_rate
        total_amount = taxable_amount + sales_tax
        amount_financed = total_amount - down_payment - params.trade_value

        resolved = await self._rate_resolver.finance_rate(
            vehicle, term, credit_tier, settings, override
        )
        apr = resolved.value
        logger.debug(
            "Finance rate resolved",
            extra={
                "vin": vehicle.vin,
                "term": term,
                "apr": str(apr),
                "source": resolved.source.value,
            },
        )

        precise_payment = (
            level_payment(amount_financed, apr, term) if amount_financed > 0 else ZERO
        )
        payment = round_payment(precise_payment, settings.display.rounding_method)

        total_at_signing = down_payment + fees.doc_fee + sales_tax * finance.signing_tax_fraction

        match = resolved.match
        if match is not None and match.disclaimer:
            disclaimer = match.disclaimer
        else:
            disclaimer = finance_disclaimer(
                payment=payment,
                term=term,
                apr=apr,
                down_payment=down_payment,
                total_at_signing=total_at_signing,
                today=self._today(),
                program_name=match.program_name if match is not None else None,
            )

        return PaymentResult(
            type=PaymentType.FINANCE,
            payment=payment,
            term=term,
            total_at_signing=whole_units(total_at_signing),
            incentives_saved=incentives,
            disclaimer=disclaimer,
            has_manufacturer_rate=resolved.is_manufacturer,
            rate_source=resolved.source,
            apr=apr,
            amount_financed=whole_units(amount_financed),
            total_price=whole_units(total_amount),
            breakdown=PaymentBreakdown(
                vehicle_price=whole_units(vehicle_price),
                incentives=deduction(incentives),
                sale_price=whole_units(sale_price),
                doc_fee=whole_units(fees.doc_fee),
                electronic_filing=whole_units(fees.electronic_filing),
                sales_tax=whole_units(sales_tax),
                total_amount=whole_units(total_amount),
                down_payment=deduction(down_payment),
                trade_value=deduction(params.trade_value),
                amount_financed=whole_units(amount_financed),
            ),
        )
