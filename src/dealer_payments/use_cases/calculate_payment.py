"""Single-vehicle payment calculation, by VIN or by vehicle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dealer_payments.domain.dealer_settings import DealerSettings
from dealer_payments.domain.errors import CalculationError, DomainError, NotFoundError
from dealer_payments.domain.payment import (
    PaymentParameters,
    PaymentRequest,
    PaymentResult,
    PaymentType,
)
from dealer_payments.domain.vehicle import Vehicle
from dealer_payments.ports.vehicle_inventory_repository import VehicleInventoryRepository
from dealer_payments.use_cases.calculate_finance_payment import CalculateFinancePayment
from dealer_payments.use_cases.calculate_lease_payment import CalculateLeasePayment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CalculatePaymentRequest:
    """
    vehicle is either a Vehicle or a VIN to look up in the inventory.
    """

    vehicle: Vehicle | str
    payment_type: PaymentType
    settings: DealerSettings
    params: PaymentParameters = field(default_factory=PaymentParameters)


class CalculatePayment:
    """
    Calculate one vehicle's finance or lease payment.

    Keeps "vehicle not found" (NotFoundError) apart from "calculation failed"
    (CalculationError). Validation errors propagate unchanged; any other
    failure inside a calculator is reported as a CalculationError.
    """

    def __init__(
        self,
        repository: VehicleInventoryRepository,
        finance_calculator: CalculateFinancePayment,
        lease_calculator: CalculateLeasePayment,
    ) -> None:
        self._repository = repository
        self._finance_calculator = finance_calculator
        self._lease_calculator = lease_calculator

    def _load(self, target: Vehicle | str) -> Vehicle:
        if isinstance(target, Vehicle):
            return target

        vehicle = self._repository.get_by_vin(target)
        if vehicle is None:
            raise NotFoundError("Vehicle", target)
        return vehicle

    async def calculate(
        self,
        vehicle: Vehicle,
        payment_type: PaymentType,
        settings: DealerSettings,
        params: PaymentParameters,
    ) -> PaymentResult:
        """Run the calculator for payment_type against an already loaded vehicle."""
        request = PaymentRequest(vehicle=vehicle, settings=settings, params=params)
        calculator = (
            self._lease_calculator
            if payment_type is PaymentType.LEASE
            else self._finance_calculator
        )

        try:
            return await calculator.execute(request)
        except DomainError:
            raise
        except Exception as exc:
            logger.exception(
                "Payment calculation failed",
                extra={"vin": vehicle.vin, "payment_type": payment_type.value},
            )
            raise CalculationError(
                f"Could not calculate {payment_type.value} payment for vehicle {vehicle.vin}",
                vin=vehicle.vin,
            ) from exc

    async def execute(self, request: CalculatePaymentRequest) -> PaymentResult:
        """
        Execute a single-vehicle calculation.

        Raises:
            NotFoundError: If a VIN is given and it is not in the inventory
            InvalidPaymentInput: If the parameters are invalid
            CalculationError: If the payment cannot be computed
        """
        vehicle = self._load(request.vehicle)
        return await self.calculate(
            vehicle, request.payment_type, request.settings, request.params
        )
