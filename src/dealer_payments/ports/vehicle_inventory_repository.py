from __future__ import annotations

from abc import ABC, abstractmethod

from dealer_payments.domain.vehicle import Vehicle


class VehicleInventoryRepository(ABC):
    """
    Port for dealer inventory access.

    The engine only reads vehicles; sourcing and normalizing the upstream
    inventory feed is the implementation's concern.
    """

    @abstractmethod
    def get_by_vin(self, vin: str) -> Vehicle | None:
        """
        Get a vehicle by VIN.

        Args:
            vin: Vehicle identification number (case-insensitive)

        Returns:
            Vehicle if found, None otherwise
        """
        ...

    @abstractmethod
    def list_all(self) -> list[Vehicle]:
        """Return the full inventory in a stable order."""
        ...
