from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from dealer_payments.domain.dealer_settings import DealerSettings
from dealer_payments.entrypoints.http.dependencies import (
    get_calculate_bulk_payments_use_case,
    get_calculate_payment_use_case,
    get_dealer_settings,
)
from dealer_payments.entrypoints.http.dtos.payments import (
    BatchSummaryDTO,
    PaymentParametersDTO,
    PaymentResponseDTO,
)
from dealer_payments.entrypoints.http.error_responses import ErrorResponse
from dealer_payments.entrypoints.http.mappers.payment_mapper import PaymentMapper
from dealer_payments.use_cases.calculate_bulk_payments import (
    CalculateBulkPayments,
    CalculateBulkPaymentsRequest,
)
from dealer_payments.use_cases.calculate_payment import (
    CalculatePayment,
    CalculatePaymentRequest,
)
from dealer_payments.use_cases.export_bulk_results import (
    export_bulk_results_csv,
    export_filename,
)


router = APIRouter(tags=["Payments"])


def _bulk_request(
    payload: PaymentParametersDTO, settings: DealerSettings
) -> CalculateBulkPaymentsRequest:
    return CalculateBulkPaymentsRequest(
        payment_type=PaymentMapper.to_payment_type(payload),
        settings=settings,
        params=PaymentMapper.to_domain_params(payload),
    )


# Bulk routes are registered before /payments/{vin} so "bulk" is never read as a VIN
@router.post(
    "/payments/bulk",
    response_model=BatchSummaryDTO,
    summary="Calculate payments for the whole inventory",
    description="""
    Apply one payment configuration to every vehicle in inventory.

    Each vehicle is calculated independently: a vehicle that fails becomes a
    failed row with an error message and never aborts the batch.
    `average_payment` is the rounded mean of the successful payments.
    """,
    responses={422: {"model": ErrorResponse, "description": "Invalid parameters"}},
)
async def calculate_bulk_payments(
    payload: PaymentParametersDTO,
    settings: DealerSettings = Depends(get_dealer_settings),
    use_case: CalculateBulkPayments = Depends(get_calculate_bulk_payments_use_case),
) -> BatchSummaryDTO:
    summary = await use_case.execute(_bulk_request(payload, settings))
    return PaymentMapper.to_batch_response(summary)


@router.post(
    "/payments/bulk/export",
    summary="Export bulk payments as CSV",
    description="""
    Same calculation as `POST /v1/payments/bulk`, returned as CSV with header
    `VIN,Stock Number,Status,Monthly Payment,Due at Signing,Error`.
    """,
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}, "description": "One row per vehicle"},
        422: {"model": ErrorResponse, "description": "Invalid parameters"},
    },
)
async def export_bulk_payments(
    payload: PaymentParametersDTO,
    settings: DealerSettings = Depends(get_dealer_settings),
    use_case: CalculateBulkPayments = Depends(get_calculate_bulk_payments_use_case),
) -> Response:
    request = _bulk_request(payload, settings)
    summary = await use_case.execute(request)

    filename = export_filename(request.payment_type, date.today())
    return Response(
        content=export_bulk_results_csv(summary.results),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/payments/{vin}",
    response_model=PaymentResponseDTO,
    summary="Calculate a vehicle's payment",
    description="""
    Calculate the finance or lease payment for one vehicle in inventory.

    ## Monetary Values
    - All monetary values are strings (e.g., "2000.00")
    - Omitted parameters fall back to the dealer's settings and model overrides

    ## Errors
    - 404 `NOT_FOUND`: the VIN is not in inventory
    - 422 `CALCULATION_FAILED`: the vehicle exists but its payment cannot be computed
    - 422 `VALIDATION_ERROR`: invalid parameters

    ## Example
    ```
    POST /v1/payments/1FTFW1E50PFA00001
    {
        "payment_type": "finance",
        "down_payment": "2000.00",
        "term": 60
    }
    ```
    """,
    responses={
        404: {"model": ErrorResponse, "description": "Vehicle not found"},
        422: {"model": ErrorResponse, "description": "Invalid parameters or calculation failed"},
    },
)
async def calculate_payment(
    vin: str,
    payload: PaymentParametersDTO,
    settings: DealerSettings = Depends(get_dealer_settings),
    use_case: CalculatePayment = Depends(get_calculate_payment_use_case),
) -> PaymentResponseDTO:
    """Parse → map → execute → map → return."""
    request = CalculatePaymentRequest(
        vehicle=vin,
        payment_type=PaymentMapper.to_payment_type(payload),
        settings=settings,
        params=PaymentMapper.to_domain_params(payload),
    )

    result = await use_case.execute(request)

    return PaymentMapper.to_response(result)
