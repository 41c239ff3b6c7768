"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-request, not cached.
Only process-wide singletons (the manufacturer rate cache) use lru_cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from dealer_payments.adapters.http_manufacturer_rate_feed import HttpManufacturerRateFeed
from dealer_payments.adapters.postgres_vehicle_inventory_repository import (
    PostgresVehicleInventoryRepository,
)
from dealer_payments.adapters.static_manufacturer_rate_feed import StaticManufacturerRateFeed
from dealer_payments.domain.dealer_settings import DealerSettings, default_dealer_settings
from dealer_payments.infra.config import (
    rate_cache_ttl_seconds,
    rate_feed_timeout_seconds,
    rate_feed_url_template,
)
from dealer_payments.infra.db.session import read_session
from dealer_payments.infra.rate_cache import ManufacturerRateCache
from dealer_payments.ports.manufacturer_rate_feed import ManufacturerRateFeed
from dealer_payments.ports.vehicle_inventory_repository import VehicleInventoryRepository
from dealer_payments.use_cases.calculate_bulk_payments import BatchRunner, CalculateBulkPayments
from dealer_payments.use_cases.calculate_finance_payment import CalculateFinancePayment
from dealer_payments.use_cases.calculate_lease_payment import CalculateLeasePayment
from dealer_payments.use_cases.calculate_payment import CalculatePayment
from dealer_payments.use_cases.resolve_rate import RateResolver


def get_db() -> Generator[Session, None, None]:
    """
    Provides a database session for a single request.

    Payment routes only read inventory, so the session is read-only and
    always closed when the request finishes.
    """
    with read_session() as session:
        yield session


@lru_cache
def get_rate_feed() -> ManufacturerRateFeed:
    """
    Process-wide manufacturer rate cache.

    Live HTTP feed behind a TTL cache, with the static sample offers as the
    fallback when the feed is unreachable.
    """
    timeout = rate_feed_timeout_seconds()
    return ManufacturerRateCache(
        feed=HttpManufacturerRateFeed(rate_feed_url_template(), timeout_seconds=timeout),
        fallback_feed=StaticManufacturerRateFeed(),
        ttl_seconds=rate_cache_ttl_seconds(),
        timeout_seconds=timeout,
    )


def get_dealer_settings() -> DealerSettings:
    """Settings snapshot for the request. Persistence lives outside this service."""
    return default_dealer_settings()


def get_vehicle_repository(db: Session = Depends(get_db)) -> VehicleInventoryRepository:
    return PostgresVehicleInventoryRepository(session=db)


def get_calculate_payment_use_case(
    repository: VehicleInventoryRepository = Depends(get_vehicle_repository),
    rate_feed: ManufacturerRateFeed = Depends(get_rate_feed),
) -> CalculatePayment:
    """
    Factory for a configured CalculatePayment use case.

    Called per-request: fresh repository and calculators, shared rate cache.
    """
    resolver = RateResolver(rate_feed=rate_feed)
    return CalculatePayment(
        repository=repository,
        finance_calculator=CalculateFinancePayment(rate_resolver=resolver),
        lease_calculator=CalculateLeasePayment(rate_resolver=resolver),
    )


def get_calculate_bulk_payments_use_case(
    repository: VehicleInventoryRepository = Depends(get_vehicle_repository),
    calculate_payment: CalculatePayment = Depends(get_calculate_payment_use_case),
) -> CalculateBulkPayments:
    return CalculateBulkPayments(repository=repository, runner=BatchRunner(calculate_payment))
