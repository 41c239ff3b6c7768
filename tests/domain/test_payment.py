from decimal import Decimal

import pytest

from dealer_payments.domain.payment import InvalidPaymentInput, PaymentParameters


# ============================================================================
# PaymentParameters VALIDATION
# ============================================================================


def test_defaults_are_valid():
    PaymentParameters().validate()


def test_rejects_negative_down_payment():
    with pytest.raises(InvalidPaymentInput) as exc_info:
        PaymentParameters(down_payment=Decimal("-1")).validate()

    assert exc_info.value.errors == [
        {"field": "down_payment", "message": "down_payment must be >= 0"}
    ]


def test_rejects_negative_trade_value():
    with pytest.raises(InvalidPaymentInput, match="Validation failed") as exc_info:
        PaymentParameters(trade_value=Decimal("-100")).validate()

    assert exc_info.value.errors[0]["field"] == "trade_value"


@pytest.mark.parametrize("term", [0, -36])
def test_rejects_non_positive_term(term: int):
    with pytest.raises(InvalidPaymentInput):
        PaymentParameters(term=term).validate()


def test_collects_every_invalid_field():
    params = PaymentParameters(
        down_payment=Decimal("-1"), trade_value=Decimal("-1"), term=0, annual_miles=0
    )

    with pytest.raises(InvalidPaymentInput) as exc_info:
        params.validate()

    assert [e["field"] for e in exc_info.value.errors] == [
        "down_payment",
        "trade_value",
        "term",
        "annual_miles",
    ]


def test_zero_down_and_trade_are_valid():
    PaymentParameters(down_payment=Decimal("0"), trade_value=Decimal("0")).validate()


# ============================================================================
# Vehicle PRICING HELPERS
# ============================================================================


def test_selling_price_falls_back_to_msrp(make_vehicle):
    assert make_vehicle(price=None, msrp=Decimal("35000")).selling_price == Decimal("35000")
    assert make_vehicle(price=Decimal("0"), msrp=Decimal("35000")).selling_price == Decimal("35000")


def test_missing_pricing_is_zero(make_vehicle):
    vehicle = make_vehicle(price=None, msrp=None)

    assert vehicle.selling_price == 0
    assert vehicle.sticker_price == 0


def test_aged_inventory_is_over_sixty_days(make_vehicle):
    assert not make_vehicle(dom=60).is_aged
    assert make_vehicle(dom=61).is_aged


def test_describe(make_vehicle):
    assert make_vehicle().describe() == "2026 Ford Explorer XLT"
    assert make_vehicle(trim="").describe() == "2026 Ford Explorer"
