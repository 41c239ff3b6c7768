from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable

from dealer_payments.domain.dealer_settings import LeaseTaxMethod
from dealer_payments.domain.disclaimers import lease_disclaimer
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


class CalculateLeasePayment:
    """
    Estimate a lease payment: monthly depreciation plus finance charge, plus tax.

    - Residual value is taken against MSRP (selling price when MSRP is missing)
    - Gross capitalized cost = selling price + acquisition fee
    - Down payment and incentives reduce the capitalized cost
    - Tax follows the dealer's lease tax method (monthly, upfront or capitalized)
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
        lease = settings.lease
        fees = settings.fees

        ensure_finite_pricing(vehicle)
        override = find_model_override(settings.model_overrides, vehicle.build)

        override_term = (
            override.lease.term if override is not None and override.lease is not None else None
        )
        term = params.term or override_term or lease.default_term
        annual_miles = params.annual_miles or lease.default_annual_miles

        down_payment = params.down_payment
        if down_payment is None:
            down_payment = resolve_down_payment(
                lease.down_payment, vehicle, lease.default_down_payment
            )

        selling_price = base_price(vehicle, lease.pricing_method)
        if selling_price <= 0:
            return zero_payment_result(PaymentType.LEASE, term, annual_miles)

        incentives = applicable_incentives(
            vehicle, override, IncentiveType.LEASE, params.include_incentives
        )

        residual_basis = vehicle.sticker_price or selling_price
        residual_percent = self._rate_resolver.residual_percent(vehicle, term, settings, override)
        residual_value = residual_basis * residual_percent.value / Decimal("100")

        money_factor_rate = await self._rate_resolver.money_factor(
            vehicle, term, settings, override
        )
        money_factor = money_factor_rate.value
        logger.debug(
            "Lease factors resolved",
            extra={
                "vin": vehicle.vin,
                "term": term,
                "money_factor": str(money_factor),
                "money_factor_source": money_factor_rate.source.value,
                "residual_percent": str(residual_percent.value),
            },
        )

        gross_cap_cost = selling_price + lease.acquisition_fee
        cap_cost_reduction = down_payment + incentives
        adjusted_cap_cost = gross_cap_cost - cap_cost_reduction

        months = Decimal(term)
        depreciation = (adjusted_cap_cost - residual_value) / months
        finance_charge = (adjusted_cap_cost + residual_value) * money_factor
        base_payment = depreciation + finance_charge

        monthly_tax = ZERO
        upfront_tax = ZERO
        term_tax = base_payment * fees.tax_rate * months

        if lease.tax_method is LeaseTaxMethod.UPFRONT:
            upfront_tax = term_tax
        elif lease.tax_method is LeaseTaxMethod.CAPITALIZED:
            depreciation += term_tax / months
            finance_charge += term_tax * money_factor
            base_payment = depreciation + finance_charge
        else:
            monthly_tax = base_payment * fees.tax_rate
            term_tax = monthly_tax * months

        payment = round_payment(base_payment + monthly_tax, settings.display.rounding_method)
        total_at_signing = (
            down_payment + payment + fees.doc_fee + fees.electronic_filing + upfront_tax
        )
        total_lease_cost = payment * months + down_payment

        disclaimer = lease_disclaimer(
            payment=payment,
            term=term,
            annual_miles=annual_miles,
            total_at_signing=total_at_signing,
            total_lease_cost=total_lease_cost,
            today=self._today(),
        )

        return PaymentResult(
            type=PaymentType.LEASE,
            payment=payment,
            term=term,
            total_at_signing=whole_units(total_at_signing),
            incentives_saved=incentives,
            disclaimer=disclaimer,
            has_manufacturer_rate=money_factor_rate.is_manufacturer,
            rate_source=money_factor_rate.source,
            money_factor=money_factor,
            annual_miles=annual_miles,
            residual_value=whole_units(residual_value),
            total_price=whole_units(total_lease_cost),
            breakdown=PaymentBreakdown(
                vehicle_price=whole_units(residual_basis),
                incentives=deduction(incentives),
                sale_price=whole_units(selling_price),
                doc_fee=whole_units(fees.doc_fee),
                electronic_filing=whole_units(fees.electronic_filing),
                sales_tax=whole_units(term_tax),
                total_amount=whole_units(total_lease_cost),
                down_payment=deduction(down_payment),
                acquisition_fee=whole_units(lease.acquisition_fee),
                residual_value=whole_units(residual_value),
                depreciation=whole_units(depreciation),
                finance_charge=whole_units(finance_charge),
            ),
        )
