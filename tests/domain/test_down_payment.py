from decimal import Decimal

from dealer_payments.domain.dealer_settings import (
    DownPaymentConfig,
    DownPaymentType,
    PricingMethod,
)
from dealer_payments.domain.down_payment import resolve_down_payment


def test_no_config_uses_default(make_vehicle):
    assert resolve_down_payment(None, make_vehicle(), Decimal("2500")) == Decimal("2500")


def test_fixed_config_uses_value(make_vehicle):
    config = DownPaymentConfig(type=DownPaymentType.FIXED, value=Decimal("3000"))

    assert resolve_down_payment(config, make_vehicle(), Decimal("0")) == Decimal("3000")


def test_percentage_of_selling_price(make_vehicle):
    config = DownPaymentConfig(type=DownPaymentType.PERCENTAGE, value=Decimal("10"))
    vehicle = make_vehicle(price=Decimal("33000"), msrp=Decimal("35000"))

    assert resolve_down_payment(config, vehicle, Decimal("0")) == Decimal("3300")


def test_percentage_of_msrp(make_vehicle):
    config = DownPaymentConfig(
        type=DownPaymentType.PERCENTAGE,
        value=Decimal("10"),
        based_on=PricingMethod.MSRP,
    )
    vehicle = make_vehicle(price=Decimal("33000"), msrp=Decimal("35000"))

    assert resolve_down_payment(config, vehicle, Decimal("0")) == Decimal("3500")


def test_percentage_of_selling_price_falls_back_to_msrp(make_vehicle):
    config = DownPaymentConfig(type=DownPaymentType.PERCENTAGE, value=Decimal("10"))
    vehicle = make_vehicle(price=None, msrp=Decimal("35000"))

    assert resolve_down_payment(config, vehicle, Decimal("0")) == Decimal("3500")


def test_percentage_rounds_half_up_to_whole_units(make_vehicle):
    config = DownPaymentConfig(type=DownPaymentType.PERCENTAGE, value=Decimal("15"))
    vehicle = make_vehicle(price=Decimal("33333"))

    # 33333 * 0.15 = 4999.95
    assert resolve_down_payment(config, vehicle, Decimal("0")) == Decimal("5000")


def test_percentage_without_pricing_is_zero(make_vehicle):
    config = DownPaymentConfig(type=DownPaymentType.PERCENTAGE, value=Decimal("10"))

    assert resolve_down_payment(config, make_vehicle(price=None, msrp=None), Decimal("0")) == 0


def test_never_negative(make_vehicle):
    config = DownPaymentConfig(type=DownPaymentType.FIXED, value=Decimal("-500"))

    assert resolve_down_payment(config, make_vehicle(), Decimal("0")) == Decimal("0")
