"""
Layered rate resolution.

Each function walks one documented precedence chain and always ends in a
number, so a calculation never proceeds with a missing rate:

Finance APR (resolve_finance_rate):
    1. active model override rate flagged to override manufacturer rates
    2. manufacturer feed match (when the dealer uses manufacturer rates)
    3. active model override rate
    4. dealer fallback table for the year/make/model(/trim)
    5. dealer custom tier rates (only when manufacturer rates are disabled)
    6. dealer default tier rates

Lease money factor (resolve_money_factor):
    manufacturer APR / 2400 -> model override -> make table by term
    (unlisted terms take the make default when one is configured)
    -> dealer custom factors by term -> dealer default factor

Lease residual percent (resolve_residual_percent):
    model override -> dealer model table by term
    -> make table (model family by keyword, else make-wide, each with a default)
    -> flat dealer percent -> dealer default table by term -> dealer default percent
"""

from __future__ import annotations

from typing import Iterable, Protocol

from dealer_payments.domain.amortization import apr_to_money_factor
from dealer_payments.domain.dealer_settings import (
    CreditTier,
    FinanceSettings,
    LeaseSettings,
)
from dealer_payments.domain.model_overrides import ModelOverride
from dealer_payments.domain.rates import RateMatch, RateSource, ResolvedRate
from dealer_payments.domain.vehicle import VehicleBuild


class _ModelKeyed(Protocol):
    year: int
    make: str
    model: str
    trim: str | None


def _matches_model(entry: _ModelKeyed, build: VehicleBuild) -> bool:
    return (
        entry.year == build.year
        and entry.make.lower() == build.make.lower()
        and entry.model.lower() == build.model.lower()
        and (not entry.trim or entry.trim.lower() == build.trim.lower())
    )


def find_model_override(
    overrides: Iterable[ModelOverride], build: VehicleBuild
) -> ModelOverride | None:
    """Active override for the vehicle; trim-specific entries win over trim-less ones."""
    candidates = [o for o in overrides if o.active and _matches_model(o, build)]
    if not candidates:
        return None
    return next((o for o in candidates if o.trim), candidates[0])


def resolve_finance_rate(
    *,
    build: VehicleBuild,
    credit_tier: CreditTier,
    finance: FinanceSettings,
    override: ModelOverride | None,
    manufacturer_match: RateMatch | None,
) -> ResolvedRate:
    override_rate = (
        override.finance.rate
        if override is not None and override.finance is not None
        else None
    )

    if override_rate is not None and override.finance.override_manufacturer_rate:
        return ResolvedRate(value=override_rate, source=RateSource.MODEL_OVERRIDE)

    if finance.use_manufacturer_rates and manufacturer_match is not None:
        return ResolvedRate(
            value=manufacturer_match.rate,
            source=RateSource.MANUFACTURER,
            match=manufacturer_match,
        )

    if override_rate is not None:
        return ResolvedRate(value=override_rate, source=RateSource.MODEL_OVERRIDE)

    model_fallback = next(
        (fb for fb in finance.fallback_rates.by_model if _matches_model(fb, build)), None
    )
    if model_fallback is not None:
        return ResolvedRate(
            value=model_fallback.rates.for_tier(credit_tier), source=RateSource.MODEL_FALLBACK
        )

    if not finance.use_manufacturer_rates and finance.custom_rates is not None:
        return ResolvedRate(
            value=finance.custom_rates.for_tier(credit_tier), source=RateSource.DEALER_CUSTOM
        )

    return ResolvedRate(
        value=finance.fallback_rates.default.for_tier(credit_tier),
        source=RateSource.DEALER_DEFAULT,
    )


def resolve_money_factor(
    *,
    build: VehicleBuild,
    term: int,
    lease: LeaseSettings,
    override: ModelOverride | None,
    manufacturer_match: RateMatch | None,
) -> ResolvedRate:
    if manufacturer_match is not None and manufacturer_match.rate > 0:
        return ResolvedRate(
            value=apr_to_money_factor(manufacturer_match.rate),
            source=RateSource.MANUFACTURER,
            match=manufacturer_match,
        )

    if (
        override is not None
        and override.lease is not None
        and override.lease.money_factor is not None
    ):
        return ResolvedRate(value=override.lease.money_factor, source=RateSource.MODEL_OVERRIDE)

    make_table = {make.lower(): table for make, table in lease.money_factors_by_make.items()}
    by_make = make_table.get(build.make.lower())
    if by_make is not None:
        if term in by_make:
            return ResolvedRate(value=by_make[term], source=RateSource.MAKE_TABLE)
        make_default = next(
            (
                mf
                for make, mf in lease.make_default_money_factors.items()
                if make.lower() == build.make.lower()
            ),
            None,
        )
        if make_default is not None:
            return ResolvedRate(value=make_default, source=RateSource.MAKE_TABLE)

    if term in lease.custom_money_factors:
        return ResolvedRate(value=lease.custom_money_factors[term], source=RateSource.DEALER_CUSTOM)

    return ResolvedRate(value=lease.default_money_factor, source=RateSource.DEALER_DEFAULT)


def resolve_residual_percent(
    *,
    build: VehicleBuild,
    term: int,
    lease: LeaseSettings,
    override: ModelOverride | None,
) -> ResolvedRate:
    if (
        override is not None
        and override.lease is not None
        and override.lease.residual_percentage is not None
    ):
        return ResolvedRate(
            value=override.lease.residual_percentage, source=RateSource.MODEL_OVERRIDE
        )

    residuals = lease.fallback_residuals
    model_entry = next((r for r in residuals.by_model if _matches_model(r, build)), None)
    if model_entry is not None and term in model_entry.residuals:
        return ResolvedRate(value=model_entry.residuals[term], source=RateSource.MODEL_FALLBACK)

    make_residuals = next(
        (t for t in residuals.by_make if t.make.lower() == build.make.lower()), None
    )
    if make_residuals is not None:
        return ResolvedRate(
            value=make_residuals.percent_for(build.model, term), source=RateSource.MAKE_TABLE
        )

    if lease.residual_percent is not None:
        return ResolvedRate(value=lease.residual_percent, source=RateSource.DEALER_CUSTOM)

    return ResolvedRate(
        value=residuals.default.get(term, residuals.default_percent),
        source=RateSource.DEALER_DEFAULT,
    )

