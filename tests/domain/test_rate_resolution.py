"""
Fallback chains for finance APR, lease money factor and residual percent.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from dealer_payments.domain.dealer_settings import (
    CreditTier,
    CreditTierRates,
    FallbackRates,
    FallbackResiduals,
    ModelFallbackRate,
    ModelFallbackResidual,
)
from dealer_payments.domain.model_overrides import FinanceOverride, LeaseOverride, ModelOverride
from dealer_payments.domain.rate_resolution import (
    find_model_override,
    resolve_finance_rate,
    resolve_money_factor,
    resolve_residual_percent,
)
from dealer_payments.domain.rates import RateMatch, RateSource
from dealer_payments.domain.vehicle import VehicleBuild


BUILD = VehicleBuild(year=2026, make="Ford", model="Explorer", trim="XLT")
HONDA = VehicleBuild(year=2026, make="Honda", model="Civic", trim="Sport")

MANUFACTURER = RateMatch(
    rate=Decimal("3.9"),
    term=60,
    disclaimer="3.9% APR for 60 months",
    program_name="Ford Credit Special APR",
    expiration_date="10/31/2026",
)


def _override(**kwargs) -> ModelOverride:
    defaults = dict(id="ov-1", year=2026, make="ford", model="EXPLORER")
    defaults.update(kwargs)
    return ModelOverride(**defaults)


# ==============================================================================
# find_model_override
# ==============================================================================


def test_finds_active_override_case_insensitively() -> None:
    override = _override()

    assert find_model_override([override], BUILD) is override


def test_ignores_inactive_overrides() -> None:
    assert find_model_override([_override(active=False)], BUILD) is None


def test_trim_specific_override_wins() -> None:
    generic = _override(id="generic")
    specific = _override(id="specific", trim="xlt")

    assert find_model_override([generic, specific], BUILD) is specific


def test_override_for_other_trim_or_year_does_not_apply() -> None:
    assert find_model_override([_override(trim="Platinum")], BUILD) is None
    assert find_model_override([_override(year=2025)], BUILD) is None


# ==============================================================================
# resolve_finance_rate
# ==============================================================================


@pytest.mark.parametrize("tier", list(CreditTier))
def test_default_table_answers_every_tier(settings, tier: CreditTier) -> None:
    resolved = resolve_finance_rate(
        build=BUILD,
        credit_tier=tier,
        finance=settings.finance,
        override=None,
        manufacturer_match=None,
    )

    assert resolved.source is RateSource.DEALER_DEFAULT
    assert resolved.value == settings.finance.fallback_rates.default.for_tier(tier)
    assert resolved.value.is_finite()


def test_manufacturer_rate_wins_when_enabled(settings) -> None:
    resolved = resolve_finance_rate(
        build=BUILD,
        credit_tier=CreditTier.GOOD,
        finance=settings.finance,
        override=_override(finance=FinanceOverride(rate=Decimal("1.9"))),
        manufacturer_match=MANUFACTURER,
    )

    assert resolved.value == Decimal("3.9")
    assert resolved.is_manufacturer
    assert resolved.match is MANUFACTURER


def test_flagged_override_beats_manufacturer_rate(settings) -> None:
    override = _override(
        finance=FinanceOverride(rate=Decimal("0.9"), override_manufacturer_rate=True)
    )

    resolved = resolve_finance_rate(
        build=BUILD,
        credit_tier=CreditTier.GOOD,
        finance=settings.finance,
        override=override,
        manufacturer_match=MANUFACTURER,
    )

    assert resolved.value == Decimal("0.9")
    assert resolved.source is RateSource.MODEL_OVERRIDE
    assert not resolved.is_manufacturer


def test_override_rate_used_without_manufacturer_match(settings) -> None:
    resolved = resolve_finance_rate(
        build=BUILD,
        credit_tier=CreditTier.POOR,
        finance=settings.finance,
        override=_override(finance=FinanceOverride(rate=Decimal("4.5"))),
        manufacturer_match=None,
    )

    assert resolved.value == Decimal("4.5")
    assert resolved.source is RateSource.MODEL_OVERRIDE


def test_model_fallback_rates_before_dealer_default(settings) -> None:
    model_rates = ModelFallbackRate(
        year=2026,
        make="Ford",
        model="Explorer",
        rates=CreditTierRates(
            excellent=Decimal("2.9"),
            good=Decimal("3.9"),
            fair=Decimal("7.9"),
            poor=Decimal("11.9"),
        ),
    )
    finance = replace(
        settings.finance,
        fallback_rates=replace(settings.finance.fallback_rates, by_model=(model_rates,)),
    )

    resolved = resolve_finance_rate(
        build=BUILD,
        credit_tier=CreditTier.FAIR,
        finance=finance,
        override=None,
        manufacturer_match=None,
    )

    assert resolved.value == Decimal("7.9")
    assert resolved.source is RateSource.MODEL_FALLBACK


def test_custom_rates_only_when_manufacturer_rates_disabled(settings) -> None:
    enabled = resolve_finance_rate(
        build=BUILD,
        credit_tier=CreditTier.EXCELLENT,
        finance=settings.finance,
        override=None,
        manufacturer_match=None,
    )
    disabled = resolve_finance_rate(
        build=BUILD,
        credit_tier=CreditTier.EXCELLENT,
        finance=replace(settings.finance, use_manufacturer_rates=False),
        override=None,
        manufacturer_match=MANUFACTURER,
    )

    assert enabled.value == Decimal("5.99")
    assert disabled.value == Decimal("4.99")
    assert disabled.source is RateSource.DEALER_CUSTOM


@pytest.mark.parametrize("tier", list(CreditTier))
def test_chain_always_terminates_in_a_number(settings, tier: CreditTier) -> None:
    finance = replace(
        settings.finance,
        use_manufacturer_rates=False,
        custom_rates=None,
        fallback_rates=FallbackRates(default=settings.finance.fallback_rates.default),
    )

    resolved = resolve_finance_rate(
        build=BUILD, credit_tier=tier, finance=finance, override=None, manufacturer_match=None
    )

    assert isinstance(resolved.value, Decimal)


# ==============================================================================
# resolve_money_factor
# ==============================================================================


def test_manufacturer_apr_converts_to_money_factor(settings) -> None:
    resolved = resolve_money_factor(
        build=BUILD, term=36, lease=settings.lease, override=None, manufacturer_match=MANUFACTURER
    )

    assert resolved.value == Decimal("3.9") / Decimal("2400")
    assert resolved.is_manufacturer


def test_zero_manufacturer_rate_is_not_used(settings) -> None:
    zero = replace(MANUFACTURER, rate=Decimal("0"))

    resolved = resolve_money_factor(
        build=BUILD, term=36, lease=settings.lease, override=None, manufacturer_match=zero
    )

    assert resolved.source is RateSource.DEALER_CUSTOM
    assert resolved.value == Decimal("0.00175")


def test_override_money_factor(settings) -> None:
    override = _override(lease=LeaseOverride(money_factor=Decimal("0.00099")))

    resolved = resolve_money_factor(
        build=BUILD, term=36, lease=settings.lease, override=override, manufacturer_match=None
    )

    assert resolved.value == Decimal("0.00099")
    assert resolved.source is RateSource.MODEL_OVERRIDE


def test_make_table_by_term(settings) -> None:
    resolved = resolve_money_factor(
        build=HONDA, term=36, lease=settings.lease, override=None, manufacturer_match=None
    )

    assert resolved.value == Decimal("0.00110")
    assert resolved.source is RateSource.MAKE_TABLE


def test_make_default_factor_for_unlisted_term(settings) -> None:
    resolved = resolve_money_factor(
        build=HONDA, term=30, lease=settings.lease, override=None, manufacturer_match=None
    )

    assert resolved.value == Decimal("0.00125")
    assert resolved.source is RateSource.MAKE_TABLE


def test_make_without_default_factor_uses_dealer_factors(settings) -> None:
    lease = replace(settings.lease, make_default_money_factors={})

    resolved = resolve_money_factor(
        build=HONDA, term=30, lease=lease, override=None, manufacturer_match=None
    )

    assert resolved.value == settings.lease.default_money_factor
    assert resolved.source is RateSource.DEALER_DEFAULT


def test_zero_override_money_factor_is_honoured(settings) -> None:
    override = _override(lease=LeaseOverride(money_factor=Decimal("0")))

    resolved = resolve_money_factor(
        build=BUILD, term=36, lease=settings.lease, override=override, manufacturer_match=None
    )

    assert resolved.value == Decimal("0")
    assert resolved.source is RateSource.MODEL_OVERRIDE


def test_unknown_term_falls_back_to_default_factor(settings) -> None:
    resolved = resolve_money_factor(
        build=BUILD, term=30, lease=settings.lease, override=None, manufacturer_match=None
    )

    assert resolved.value == settings.lease.default_money_factor
    assert resolved.source is RateSource.DEALER_DEFAULT


# ==============================================================================
# resolve_residual_percent
# ==============================================================================


def test_override_residual_wins(settings) -> None:
    override = _override(lease=LeaseOverride(residual_percentage=Decimal("64")))

    resolved = resolve_residual_percent(
        build=BUILD, term=36, lease=settings.lease, override=override
    )

    assert resolved.value == Decimal("64")


def test_model_residual_for_term(settings) -> None:
    residuals = replace(
        settings.lease.fallback_residuals,
        by_model=(
            ModelFallbackResidual(
                year=2026, make="Honda", model="Civic", residuals={36: Decimal("68")}
            ),
        ),
    )
    lease = replace(settings.lease, fallback_residuals=residuals)

    assert resolve_residual_percent(build=HONDA, term=36, lease=lease, override=None).value == 68
    # Model table has no 24-month entry: the Civic family table answers
    assert resolve_residual_percent(build=HONDA, term=24, lease=lease, override=None).value == 72


def test_flat_dealer_residual_before_default_table(settings) -> None:
    lease = replace(settings.lease, residual_percent=Decimal("58"))

    resolved = resolve_residual_percent(build=BUILD, term=36, lease=lease, override=None)

    assert resolved.value == Decimal("58")
    assert resolved.source is RateSource.DEALER_CUSTOM


def test_default_table_then_default_percent(settings) -> None:
    assert resolve_residual_percent(
        build=BUILD, term=36, lease=settings.lease, override=None
    ).value == Decimal("55")
    assert resolve_residual_percent(
        build=BUILD, term=30, lease=settings.lease, override=None
    ).value == Decimal("50")


def test_empty_default_table_still_yields_percent(settings) -> None:
    lease = replace(settings.lease, fallback_residuals=FallbackResiduals(default={}))

    resolved = resolve_residual_percent(build=BUILD, term=36, lease=lease, override=None)

    assert resolved.value == Decimal("50")


@pytest.mark.parametrize(
    ("model", "term", "expected"),
    [
        ("Civic", 24, Decimal("72")),
        ("Civic", 36, Decimal("68")),
        ("Civic Type R", 48, Decimal("60")),
        ("Civic", 30, Decimal("65")),
        ("CR-V", 36, Decimal("66")),
        ("HR-V", 39, Decimal("63")),
        ("CR-V", 42, Decimal("63")),
        ("Accord", 36, Decimal("64")),
        ("Pilot", 48, Decimal("56")),
        ("Accord", 30, Decimal("60")),
    ],
)
def test_make_residual_table_by_model_family(settings, model, term, expected) -> None:
    build = VehicleBuild(year=2026, make="Honda", model=model, trim="")

    resolved = resolve_residual_percent(build=build, term=term, lease=settings.lease, override=None)

    assert resolved.value == expected
    assert resolved.source is RateSource.MAKE_TABLE


def test_make_residual_table_before_flat_dealer_percent(settings) -> None:
    lease = replace(settings.lease, residual_percent=Decimal("58"))

    resolved = resolve_residual_percent(build=HONDA, term=36, lease=lease, override=None)

    assert resolved.value == Decimal("68")
