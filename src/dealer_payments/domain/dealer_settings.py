from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from dealer_payments.domain.model_overrides import ModelOverride


class CreditTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PricingMethod(str, Enum):
    MSRP = "msrp"
    SELLING = "selling"


class RoundingMethod(str, Enum):
    NEAREST_1 = "nearest1"
    NEAREST_5 = "nearest5"
    NEAREST_10 = "nearest10"


class LeaseTaxMethod(str, Enum):
    MONTHLY = "monthly"
    UPFRONT = "upfront"
    CAPITALIZED = "capitalized"


class DownPaymentType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


@dataclass(frozen=True, slots=True)
class DownPaymentConfig:
    type: DownPaymentType
    value: Decimal
    based_on: PricingMethod = PricingMethod.SELLING


@dataclass(frozen=True, slots=True)
class CreditTierRates:
    """APR (percent) per credit tier. Every tier is required."""

    excellent: Decimal
    good: Decimal
    fair: Decimal
    poor: Decimal

    def for_tier(self, tier: CreditTier) -> Decimal:
        return getattr(self, CreditTier(tier).value)


@dataclass(frozen=True, slots=True)
class ModelFallbackRate:
    year: int
    make: str
    model: str
    rates: CreditTierRates
    trim: str | None = None


@dataclass(frozen=True, slots=True)
class ModelFallbackResidual:
    year: int
    make: str
    model: str
    residuals: dict[int, Decimal]  # term -> residual percent
    trim: str | None = None


@dataclass(frozen=True, slots=True)
class ModelFamilyResidual:
    """Residuals for every model whose name contains one of the keywords."""

    keywords: tuple[str, ...]
    residuals: dict[int, Decimal]  # term -> residual percent
    default_percent: Decimal

    def matches(self, model: str) -> bool:
        model = model.lower()
        return any(keyword.lower() in model for keyword in self.keywords)


@dataclass(frozen=True, slots=True)
class MakeResidualTable:
    """Make-wide residuals; the first matching model family takes precedence."""

    make: str
    residuals: dict[int, Decimal]  # term -> residual percent
    default_percent: Decimal
    families: tuple[ModelFamilyResidual, ...] = ()

    def percent_for(self, model: str, term: int) -> Decimal:
        family = next((f for f in self.families if f.matches(model)), None)
        if family is not None:
            return family.residuals.get(term, family.default_percent)
        return self.residuals.get(term, self.default_percent)


@dataclass(frozen=True, slots=True)
class FallbackRates:
    default: CreditTierRates
    by_model: tuple[ModelFallbackRate, ...] = ()


@dataclass(frozen=True, slots=True)
class FallbackResiduals:
    default: dict[int, Decimal]  # term -> residual percent
    by_model: tuple[ModelFallbackResidual, ...] = ()
    by_make: tuple[MakeResidualTable, ...] = ()
    default_percent: Decimal = Decimal("50")


@dataclass(frozen=True, slots=True)
class CustomFee:
    name: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class FinanceSettings:
    fallback_rates: FallbackRates
    default_terms: tuple[int, ...] = (36, 48, 60, 72, 84)
    default_term: int = 72
    default_down_payment: Decimal = Decimal("0")
    down_payment: DownPaymentConfig | None = None
    default_credit_tier: CreditTier = CreditTier.GOOD
    use_manufacturer_rates: bool = True
    pricing_method: PricingMethod = PricingMethod.SELLING
    custom_rates: CreditTierRates | None = None
    # Share of sales tax collected at signing. Simplified convention pending
    # dealer confirmation for the target jurisdiction.
    signing_tax_fraction: Decimal = Decimal("0.10")


@dataclass(frozen=True, slots=True)
class LeaseSettings:
    fallback_residuals: FallbackResiduals
    default_terms: tuple[int, ...] = (24, 36, 39, 48)
    default_term: int = 36
    default_mileage: tuple[int, ...] = (10_000, 12_000, 15_000)
    default_annual_miles: int = 12_000
    default_down_payment: Decimal = Decimal("2500")
    down_payment: DownPaymentConfig | None = None
    pricing_method: PricingMethod = PricingMethod.MSRP
    acquisition_fee: Decimal = Decimal("595")
    disposition_fee: Decimal = Decimal("350")
    excess_mileage_charge: Decimal = Decimal("0.20")
    tax_method: LeaseTaxMethod = LeaseTaxMethod.MONTHLY
    custom_money_factors: dict[int, Decimal] = field(default_factory=dict)
    money_factors_by_make: dict[str, dict[int, Decimal]] = field(default_factory=dict)
    # used for terms missing from a make table
    make_default_money_factors: dict[str, Decimal] = field(default_factory=dict)
    default_money_factor: Decimal = Decimal("0.00175")
    residual_percent: Decimal | None = None  # flat dealer-wide residual, if configured


@dataclass(frozen=True, slots=True)
class FeeSettings:
    doc_fee: Decimal = Decimal("125")
    electronic_filing: Decimal = Decimal("100")
    state_tax_rate: Decimal = Decimal("0.06875")
    county_tax_rate: Decimal = Decimal("0.005")
    custom_fees: tuple[CustomFee, ...] = ()

    @property
    def tax_rate(self) -> Decimal:
        return self.state_tax_rate + self.county_tax_rate

    @property
    def fixed_fees(self) -> Decimal:
        return self.doc_fee + self.electronic_filing + sum(
            (fee.amount for fee in self.custom_fees), Decimal("0")
        )


@dataclass(frozen=True, slots=True)
class DisplaySettings:
    rounding_method: RoundingMethod = RoundingMethod.NEAREST_5


@dataclass(frozen=True, slots=True)
class DealerSettings:
    """Immutable configuration snapshot consumed by a single calculation call."""

    dealer_id: str
    dealer_name: str
    finance: FinanceSettings
    lease: LeaseSettings
    fees: FeeSettings = field(default_factory=FeeSettings)
    display: DisplaySettings = field(default_factory=DisplaySettings)
    model_overrides: tuple[ModelOverride, ...] = ()


def default_dealer_settings() -> DealerSettings:
    """Baseline dealer configuration used when no stored snapshot is supplied."""
    return DealerSettings(
        dealer_id="default-dealer",
        dealer_name="Default Dealer",
        finance=FinanceSettings(
            fallback_rates=FallbackRates(
                default=CreditTierRates(
                    excellent=Decimal("5.99"),
                    good=Decimal("6.99"),
                    fair=Decimal("9.99"),
                    poor=Decimal("13.99"),
                ),
            ),
            custom_rates=CreditTierRates(
                excellent=Decimal("4.99"),
                good=Decimal("6.99"),
                fair=Decimal("9.99"),
                poor=Decimal("14.99"),
            ),
        ),
        lease=LeaseSettings(
            fallback_residuals=FallbackResiduals(
                default={
                    24: Decimal("60"),
                    36: Decimal("55"),
                    39: Decimal("52"),
                    48: Decimal("48"),
                },
                by_make=(
                    MakeResidualTable(
                        make="Honda",
                        residuals={
                            24: Decimal("68"),
                            36: Decimal("64"),
                            39: Decimal("61"),
                            48: Decimal("56"),
                        },
                        default_percent=Decimal("60"),
                        families=(
                            ModelFamilyResidual(
                                keywords=("civic",),
                                residuals={
                                    24: Decimal("72"),
                                    36: Decimal("68"),
                                    39: Decimal("65"),
                                    48: Decimal("60"),
                                },
                                default_percent=Decimal("65"),
                            ),
                            ModelFamilyResidual(
                                keywords=("hr-v", "cr-v"),
                                residuals={
                                    24: Decimal("70"),
                                    36: Decimal("66"),
                                    39: Decimal("63"),
                                    48: Decimal("58"),
                                },
                                default_percent=Decimal("63"),
                            ),
                        ),
                    ),
                ),
            ),
            custom_money_factors={
                24: Decimal("0.00150"),
                36: Decimal("0.00175"),
                39: Decimal("0.00185"),
                48: Decimal("0.00200"),
            },
            money_factors_by_make={
                "honda": {
                    24: Decimal("0.00100"),
                    36: Decimal("0.00110"),
                    39: Decimal("0.00125"),
                    48: Decimal("0.00140"),
                },
            },
            make_default_money_factors={"honda": Decimal("0.00125")},
        ),
    )
