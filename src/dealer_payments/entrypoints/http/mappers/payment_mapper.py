from __future__ import annotations

from decimal import Decimal, InvalidOperation

from dealer_payments.domain.dealer_settings import CreditTier
from dealer_payments.domain.errors import ValidationError
from dealer_payments.domain.payment import (
    BatchSummary,
    BulkCalculationResult,
    PaymentBreakdown,
    PaymentParameters,
    PaymentResult,
    PaymentType,
)
from dealer_payments.entrypoints.http.dtos.payments import (
    BatchSummaryDTO,
    BulkCalculationResultDTO,
    PaymentBreakdownDTO,
    PaymentParametersDTO,
    PaymentResponseDTO,
)


def _str_or_none(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


class PaymentMapper:
    """Maps between REST DTOs and domain models for payments."""

    @staticmethod
    def to_payment_type(dto: PaymentParametersDTO) -> PaymentType:
        return PaymentType(dto.payment_type)

    @staticmethod
    def to_domain_params(dto: PaymentParametersDTO) -> PaymentParameters:
        """
        Converts the request DTO to domain PaymentParameters.

        Handles string → Decimal conversion at the boundary.

        Raises:
            ValidationError: If money strings cannot be converted to Decimals
        """
        errors = []

        down_payment: Decimal | None = None
        if dto.down_payment is not None:
            try:
                down_payment = Decimal(dto.down_payment)
            except (InvalidOperation, ValueError):
                errors.append(
                    {
                        "field": "down_payment",
                        "message": f"Must be a valid decimal: {dto.down_payment}",
                        "code": "INVALID_DECIMAL",
                    }
                )

        try:
            trade_value = Decimal(dto.trade_value)
        except (InvalidOperation, ValueError):
            errors.append(
                {
                    "field": "trade_value",
                    "message": f"Must be a valid decimal: {dto.trade_value}",
                    "code": "INVALID_DECIMAL",
                }
            )
            trade_value = Decimal("0")  # Placeholder to continue validation

        if errors:
            raise ValidationError(errors=errors)

        return PaymentParameters(
            down_payment=down_payment,
            trade_value=trade_value,
            term=dto.term,
            credit_tier=CreditTier(dto.credit_tier) if dto.credit_tier else None,
            annual_miles=dto.annual_miles,
            include_incentives=dto.include_incentives,
        )

    @staticmethod
    def _to_breakdown(breakdown: PaymentBreakdown) -> PaymentBreakdownDTO:
        return PaymentBreakdownDTO(
            vehicle_price=str(breakdown.vehicle_price),
            incentives=str(breakdown.incentives),
            sale_price=str(breakdown.sale_price),
            doc_fee=str(breakdown.doc_fee),
            electronic_filing=str(breakdown.electronic_filing),
            sales_tax=str(breakdown.sales_tax),
            total_amount=str(breakdown.total_amount),
            down_payment=str(breakdown.down_payment),
            trade_value=_str_or_none(breakdown.trade_value),
            amount_financed=_str_or_none(breakdown.amount_financed),
            acquisition_fee=_str_or_none(breakdown.acquisition_fee),
            residual_value=_str_or_none(breakdown.residual_value),
            depreciation=_str_or_none(breakdown.depreciation),
            finance_charge=_str_or_none(breakdown.finance_charge),
        )

    @staticmethod
    def to_response(result: PaymentResult) -> PaymentResponseDTO:
        """Converts a domain PaymentResult to the response DTO (Decimal → string)."""
        return PaymentResponseDTO(
            type=result.type.value,
            payment=str(result.payment),
            term=result.term,
            total_at_signing=str(result.total_at_signing),
            incentives_saved=str(result.incentives_saved),
            disclaimer=result.disclaimer,
            has_manufacturer_rate=result.has_manufacturer_rate,
            rate_source=result.rate_source.value if result.rate_source is not None else None,
            apr=_str_or_none(result.apr),
            money_factor=_str_or_none(result.money_factor),
            annual_miles=result.annual_miles,
            residual_value=_str_or_none(result.residual_value),
            amount_financed=_str_or_none(result.amount_financed),
            total_price=_str_or_none(result.total_price),
            breakdown=PaymentMapper._to_breakdown(result.breakdown),
        )

    @staticmethod
    def _to_bulk_result(result: BulkCalculationResult) -> BulkCalculationResultDTO:
        return BulkCalculationResultDTO(
            vin=result.vin,
            stock_number=result.stock_number,
            success=result.success,
            payment=_str_or_none(result.payment),
            total_at_signing=_str_or_none(result.total_at_signing),
            error=result.error,
        )

    @staticmethod
    def to_batch_response(summary: BatchSummary) -> BatchSummaryDTO:
        return BatchSummaryDTO(
            total=summary.total,
            successful=summary.successful,
            failed=summary.failed,
            average_payment=str(summary.average_payment),
            results=[PaymentMapper._to_bulk_result(r) for r in summary.results],
        )
