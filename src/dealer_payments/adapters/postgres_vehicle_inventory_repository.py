"""PostgreSQL implementation of VehicleInventoryRepository."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dealer_payments.domain.vehicle import (
    Incentive,
    IncentiveType,
    InventoryType,
    Vehicle,
    VehicleBuild,
)
from dealer_payments.infra.db.models.vehicle import VehicleRow
from dealer_payments.ports.vehicle_inventory_repository import VehicleInventoryRepository


class PostgresVehicleInventoryRepository(VehicleInventoryRepository):
    """
    PostgreSQL implementation of VehicleInventoryRepository.

    - Uses SQLAlchemy ORM for database access
    - VIN lookup is case-insensitive
    - Converts VehicleRow (infrastructure) to Vehicle (domain)
    """

    def __init__(self, session: Session) -> None:
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    def get_by_vin(self, vin: str) -> Vehicle | None:
        query = select(VehicleRow).where(func.upper(VehicleRow.vin) == vin.strip().upper())
        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def list_all(self) -> list[Vehicle]:
        query = select(VehicleRow).order_by(VehicleRow.stock_no, VehicleRow.vin)
        rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def _to_domain(self, row: VehicleRow) -> Vehicle:
        """
        Convert database model (VehicleRow) to domain entity (Vehicle).

        Args:
            row: SQLAlchemy VehicleRow model

        Returns:
            Vehicle domain entity
        """
        return Vehicle(
            vin=row.vin,
            stock_no=row.stock_no or "",
            inventory_type=InventoryType(row.inventory_type or InventoryType.NEW.value),
            price=row.price,  # Already Decimal from NUMERIC column
            msrp=row.msrp,
            dom=row.dom or 0,
            build=VehicleBuild(
                year=row.year,
                make=row.make,
                model=row.model,
                trim=row.trim or "",
                body_style=row.body_style or "",
                engine=row.engine or "",
                transmission=row.transmission or "",
                drivetrain=row.drivetrain or "",
                exterior_color=row.exterior_color or "",
                interior_color=row.interior_color or "",
            ),
            eligible_incentives=tuple(
                self._incentive_to_domain(item) for item in (row.eligible_incentives or [])
            ),
        )

    @staticmethod
    def _incentive_to_domain(item: dict[str, Any]) -> Incentive:
        return Incentive(
            id=str(item.get("id", "")),
            type=IncentiveType(item["type"]),
            name=item.get("name", ""),
            amount=Decimal(str(item.get("amount", "0"))),
            stackable=item.get("stackable", True) is not False,
        )
