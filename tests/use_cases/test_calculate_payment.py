"""Test suite for CalculatePayment use case."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from dealer_payments.domain.errors import CalculationError, NotFoundError
from dealer_payments.domain.payment import (
    InvalidPaymentInput,
    PaymentParameters,
    PaymentType,
)
from dealer_payments.ports.vehicle_inventory_repository import VehicleInventoryRepository
from dealer_payments.use_cases.calculate_finance_payment import CalculateFinancePayment
from dealer_payments.use_cases.calculate_lease_payment import CalculateLeasePayment
from dealer_payments.use_cases.calculate_payment import CalculatePayment, CalculatePaymentRequest
from dealer_payments.use_cases.resolve_rate import RateResolver


@pytest.fixture()
def mock_repository() -> Mock:
    """Mock VehicleInventoryRepository."""
    return Mock(spec=VehicleInventoryRepository)


@pytest.fixture()
def use_case(mock_repository: Mock, today) -> CalculatePayment:
    resolver = RateResolver(rate_feed=None)
    return CalculatePayment(
        repository=mock_repository,
        finance_calculator=CalculateFinancePayment(resolver, today=lambda: today),
        lease_calculator=CalculateLeasePayment(resolver, today=lambda: today),
    )


# ==============================================================================
# Happy Path Tests
# ==============================================================================


@pytest.mark.asyncio
async def test_calculates_finance_payment_by_vin(
    use_case, mock_repository, make_vehicle, settings
):
    mock_repository.get_by_vin.return_value = make_vehicle()

    result = await use_case.execute(
        CalculatePaymentRequest(
            vehicle="1FMSK8DH0TGA00001", payment_type=PaymentType.FINANCE, settings=settings
        )
    )

    assert result.type is PaymentType.FINANCE
    assert result.payment > 0
    mock_repository.get_by_vin.assert_called_once_with("1FMSK8DH0TGA00001")


@pytest.mark.asyncio
async def test_calculates_lease_payment(use_case, mock_repository, make_vehicle, settings):
    mock_repository.get_by_vin.return_value = make_vehicle()

    result = await use_case.execute(
        CalculatePaymentRequest(
            vehicle="1FMSK8DH0TGA00001", payment_type=PaymentType.LEASE, settings=settings
        )
    )

    assert result.type is PaymentType.LEASE
    assert result.money_factor is not None


@pytest.mark.asyncio
async def test_accepts_a_vehicle_without_lookup(
    use_case, mock_repository, make_vehicle, settings
):
    result = await use_case.execute(
        CalculatePaymentRequest(
            vehicle=make_vehicle(), payment_type=PaymentType.FINANCE, settings=settings
        )
    )

    assert result.type is PaymentType.FINANCE
    mock_repository.get_by_vin.assert_not_called()


@pytest.mark.asyncio
async def test_same_inputs_give_identical_results(use_case, make_vehicle, settings):
    request = CalculatePaymentRequest(
        vehicle=make_vehicle(),
        payment_type=PaymentType.FINANCE,
        settings=settings,
        params=PaymentParameters(down_payment=Decimal("1500"), term=60),
    )

    assert await use_case.execute(request) == await use_case.execute(request)


# ==============================================================================
# Error Tests
# ==============================================================================


@pytest.mark.asyncio
async def test_unknown_vin_raises_not_found(use_case, mock_repository, settings):
    mock_repository.get_by_vin.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        await use_case.execute(
            CalculatePaymentRequest(
                vehicle="UNKNOWN", payment_type=PaymentType.FINANCE, settings=settings
            )
        )

    assert exc_info.value.context["identifier"] == "UNKNOWN"
    assert "not found" in exc_info.value.message


@pytest.mark.asyncio
async def test_validation_errors_propagate_unchanged(use_case, make_vehicle, settings):
    request = CalculatePaymentRequest(
        vehicle=make_vehicle(),
        payment_type=PaymentType.LEASE,
        settings=settings,
        params=PaymentParameters(trade_value=Decimal("-1")),
    )

    with pytest.raises(InvalidPaymentInput):
        await use_case.execute(request)


@pytest.mark.asyncio
async def test_unexpected_failure_becomes_calculation_error(
    mock_repository, make_vehicle, settings
):
    finance = Mock(spec=CalculateFinancePayment)
    finance.execute = AsyncMock(side_effect=ZeroDivisionError("division by zero"))
    use_case = CalculatePayment(
        repository=mock_repository,
        finance_calculator=finance,
        lease_calculator=Mock(spec=CalculateLeasePayment),
    )

    with pytest.raises(CalculationError) as exc_info:
        await use_case.execute(
            CalculatePaymentRequest(
                vehicle=make_vehicle(), payment_type=PaymentType.FINANCE, settings=settings
            )
        )

    assert exc_info.value.context["vin"] == "1FMSK8DH0TGA00001"
    assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
