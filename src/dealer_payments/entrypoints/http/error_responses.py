"""REST API error response models.

Structured error responses that provide consistent format for all HTTP errors.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Individual error detail for field-level errors."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "down_payment",
                "message": "down_payment must be >= 0",
                "code": "INVALID_VALUE",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Vehicle missing from inventory:
            {
                "detail": "Vehicle with identifier '1FTFW1E50PFA00001' not found",
                "code": "NOT_FOUND"
            }

        Vehicle found but the payment could not be computed:
            {
                "detail": "Vehicle price is not a finite number",
                "code": "CALCULATION_FAILED"
            }
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "detail": "Vehicle with identifier '1FTFW1E50PFA00001' not found",
                    "code": "NOT_FOUND",
                },
                {"detail": "Vehicle price is not a finite number", "code": "CALCULATION_FAILED"},
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {"field": "term", "message": "term must be > 0"},
                        {"field": "trade_value", "message": "trade_value must be >= 0"},
                    ],
                },
            ]
        }
    )
