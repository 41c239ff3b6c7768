from __future__ import annotations

from dealer_payments.domain.vehicle import Vehicle
from dealer_payments.ports.vehicle_inventory_repository import VehicleInventoryRepository


class InMemoryVehicleInventoryRepository(VehicleInventoryRepository):
    """
    Canonical contract implementation for tests.

    - Stores vehicles in insertion order
    - VIN lookup is case-insensitive
    """

    def __init__(self, vehicles: list[Vehicle]) -> None:
        self._vehicles = list(vehicles)

    def get_by_vin(self, vin: str) -> Vehicle | None:
        wanted = vin.strip().upper()
        return next((v for v in self._vehicles if v.vin.upper() == wanted), None)

    def list_all(self) -> list[Vehicle]:
        return list(self._vehicles)
