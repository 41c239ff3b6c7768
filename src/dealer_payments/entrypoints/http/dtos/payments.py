from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


MONEY_PATTERN = r"^\d+(\.\d{1,2})?$"

PaymentTypeLiteral = Literal["finance", "lease"]
CreditTierLiteral = Literal["excellent", "good", "fair", "poor"]


class PaymentParametersDTO(BaseModel):
    """Calculation knobs; unset values fall back to dealer settings."""

    payment_type: PaymentTypeLiteral = Field(
        default="finance",
        description="Calculation type: finance or lease",
        examples=["finance"],
    )
    down_payment: str | None = Field(
        default=None,
        description="Down payment as decimal string. Omit to use the dealer's down payment policy",
        examples=["2000.00"],
        pattern=MONEY_PATTERN,
    )
    trade_value: str = Field(
        default="0",
        description="Trade-in value as decimal string (finance only)",
        examples=["0"],
        pattern=MONEY_PATTERN,
    )
    term: int | None = Field(
        default=None,
        description="Term in months. Omit to use the model override or dealer default term",
        examples=[60],
        ge=1,
    )
    credit_tier: CreditTierLiteral | None = Field(
        default=None,
        description="Credit tier used for fallback finance rates",
        examples=["good"],
    )
    annual_miles: int | None = Field(
        default=None,
        description="Annual mileage allowance (lease only)",
        examples=[12000],
        ge=1,
    )
    include_incentives: bool = Field(
        default=True,
        description="Apply eligible incentives and model override bonuses",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "payment_type": "finance",
                "down_payment": "2000.00",
                "trade_value": "0",
                "term": 60,
                "credit_tier": "good",
                "include_incentives": True,
            }
        }
    )


class PaymentBreakdownDTO(BaseModel):
    """Whole-unit amounts behind a payment; deductions are negative."""

    vehicle_price: str
    incentives: str
    sale_price: str
    doc_fee: str
    electronic_filing: str
    sales_tax: str
    total_amount: str
    down_payment: str
    trade_value: str | None = None
    amount_financed: str | None = None
    acquisition_fee: str | None = None
    residual_value: str | None = None
    depreciation: str | None = None
    finance_charge: str | None = None


class PaymentResponseDTO(BaseModel):
    """Calculated payment for one vehicle."""

    type: PaymentTypeLiteral
    payment: str = Field(description="Rounded monthly payment", examples=["700"])
    term: int = Field(examples=[60])
    total_at_signing: str = Field(examples=["2158"])
    incentives_saved: str = Field(examples=["0"])
    disclaimer: str
    has_manufacturer_rate: bool
    rate_source: str | None = Field(default=None, examples=["dealer_default"])
    apr: str | None = Field(default=None, examples=["6.99"])
    money_factor: str | None = Field(default=None, examples=["0.00175"])
    annual_miles: int | None = None
    residual_value: str | None = None
    amount_financed: str | None = None
    total_price: str | None = None
    breakdown: PaymentBreakdownDTO


class BulkCalculationResultDTO(BaseModel):
    vin: str
    stock_number: str
    success: bool
    payment: str | None = None
    total_at_signing: str | None = None
    error: str | None = None


class BatchSummaryDTO(BaseModel):
    """Aggregate outcome of a bulk calculation."""

    total: int
    successful: int
    failed: int
    average_payment: str
    results: list[BulkCalculationResultDTO]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total": 2,
                "successful": 1,
                "failed": 1,
                "average_payment": "700",
                "results": [
                    {
                        "vin": "1FTFW1E50PFA00001",
                        "stock_number": "F1001",
                        "success": True,
                        "payment": "700",
                        "total_at_signing": "2158",
                        "error": None,
                    },
                    {
                        "vin": "1FMCU9G61PUA00002",
                        "stock_number": "F1002",
                        "success": False,
                        "payment": None,
                        "total_at_signing": None,
                        "error": "Vehicle price is not a finite number",
                    },
                ],
            }
        }
    )
