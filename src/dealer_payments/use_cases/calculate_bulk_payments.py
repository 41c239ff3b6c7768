from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from dealer_payments.domain.dealer_settings import DealerSettings
from dealer_payments.domain.errors import DomainError
from dealer_payments.domain.payment import (
    ZERO,
    BatchSummary,
    BulkCalculationResult,
    PaymentParameters,
    PaymentType,
)
from dealer_payments.domain.rounding import whole_units
from dealer_payments.domain.vehicle import Vehicle
from dealer_payments.ports.vehicle_inventory_repository import VehicleInventoryRepository
from dealer_payments.use_cases.calculate_payment import CalculatePayment

logger = logging.getLogger(__name__)


class BatchRunner:
    """
    Fan one calculation configuration out across a vehicle collection.

    Vehicles are calculated concurrently. Each one is isolated: a failure
    becomes a failed row and never aborts the batch or changes the other
    rows' outcomes. Results keep the input order.
    """

    def __init__(self, calculate_payment: CalculatePayment) -> None:
        self._calculate_payment = calculate_payment

    async def _run_one(
        self,
        vehicle: Vehicle,
        payment_type: PaymentType,
        params: PaymentParameters,
        settings: DealerSettings,
    ) -> BulkCalculationResult:
        try:
            result = await self._calculate_payment.calculate(
                vehicle, payment_type, settings, params
            )
        except Exception as exc:
            message = exc.message if isinstance(exc, DomainError) else str(exc)
            logger.warning(
                "Bulk calculation failed for vehicle",
                extra={
                    "vin": vehicle.vin,
                    "payment_type": payment_type.value,
                    "error_type": type(exc).__name__,
                    "error_message": message,
                },
            )
            return BulkCalculationResult(
                vin=vehicle.vin,
                stock_number=vehicle.stock_no,
                success=False,
                error=message or "Calculation failed",
            )

        return BulkCalculationResult(
            vin=vehicle.vin,
            stock_number=vehicle.stock_no,
            success=True,
            payment=result.payment,
            total_at_signing=result.total_at_signing,
        )

    async def run(
        self,
        vehicles: list[Vehicle],
        payment_type: PaymentType,
        params: PaymentParameters,
        settings: DealerSettings,
    ) -> BatchSummary:
        results = list(
            await asyncio.gather(
                *(self._run_one(v, payment_type, params, settings) for v in vehicles)
            )
        )

        payments = [r.payment for r in results if r.success and r.payment is not None]
        successful = sum(1 for r in results if r.success)
        average = (
            whole_units(sum(payments, ZERO) / Decimal(len(payments))) if payments else ZERO
        )

        return BatchSummary(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            average_payment=average,
            results=results,
        )


@dataclass(frozen=True, slots=True)
class CalculateBulkPaymentsRequest:
    payment_type: PaymentType
    settings: DealerSettings
    params: PaymentParameters = field(default_factory=PaymentParameters)


class CalculateBulkPayments:
    """Calculate one configuration for every vehicle in the inventory."""

    def __init__(self, repository: VehicleInventoryRepository, runner: BatchRunner) -> None:
        self._repository = repository
        self._runner = runner

    async def execute(self, request: CalculateBulkPaymentsRequest) -> BatchSummary:
        # Invalid shared parameters would fail every row the same way
        request.params.validate()

        vehicles = self._repository.list_all()
        summary = await self._runner.run(
            vehicles, request.payment_type, request.params, request.settings
        )

        logger.info(
            "Bulk calculation finished",
            extra={
                "payment_type": request.payment_type.value,
                "total": summary.total,
                "successful": summary.successful,
                "failed": summary.failed,
            },
        )
        return summary
