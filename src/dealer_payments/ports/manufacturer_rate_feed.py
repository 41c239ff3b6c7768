from __future__ import annotations

from abc import ABC, abstractmethod

from dealer_payments.domain.rates import ManufacturerRateRecord


class ManufacturerRateFeed(ABC):
    """
    Port for manufacturer incentive-rate data.

    Implementations return records already normalized to ManufacturerRateRecord.
    They may raise on transport or decoding failures; callers (the rate cache)
    own the fallback policy.
    """

    @abstractmethod
    async def fetch_rates(self, make: str) -> list[ManufacturerRateRecord]:
        """
        Fetch the current offers for a make.

        Args:
            make: Vehicle make (e.g. "Ford"), case-insensitive

        Returns:
            Normalized rate records, possibly empty
        """
        ...
