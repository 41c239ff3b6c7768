from fastapi import FastAPI

from dealer_payments.entrypoints.http.exception_handlers import register_exception_handlers
from dealer_payments.entrypoints.http.routes.health import router as health_router
from dealer_payments.entrypoints.http.routes.payments import router as payments_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="Dealer Payments API",
        description="""
        Monthly finance and lease payment estimates for dealer inventory.

        ## Features
        - Calculate a vehicle's finance or lease payment by VIN
        - Bulk-calculate one configuration across the inventory
        - Export bulk results as CSV

        ## Rates
        Manufacturer finance offers are used when they match the vehicle and
        term; otherwise model overrides and dealer fallback tables apply.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        contact={"name": "Dealer Payments Team"},
        license_info={"name": "Proprietary"},
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(payments_router, prefix="/v1")

    return app


app = build_app()
