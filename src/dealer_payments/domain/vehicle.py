from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


AGED_INVENTORY_DAYS = 60


class InventoryType(str, Enum):
    NEW = "new"
    USED = "used"
    DEMO = "demo"


class IncentiveType(str, Enum):
    FINANCE = "finance"
    LEASE = "lease"
    CASH = "cash"


@dataclass(frozen=True, slots=True)
class Incentive:
    id: str
    type: IncentiveType
    name: str
    amount: Decimal
    stackable: bool = True
    requirements: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class VehicleBuild:
    year: int
    make: str
    model: str
    trim: str = ""
    body_style: str = ""
    engine: str = ""
    transmission: str = ""
    drivetrain: str = ""
    exterior_color: str = ""
    interior_color: str = ""


@dataclass(frozen=True, slots=True)
class Vehicle:
    """
    An inventory unit as supplied by the inventory collaborator.

    price and msrp may be None or zero when the upstream listing has no pricing;
    calculators treat that as a degenerate (zero-payment) case.
    """

    vin: str
    stock_no: str
    build: VehicleBuild
    inventory_type: InventoryType = InventoryType.NEW
    price: Decimal | None = None
    msrp: Decimal | None = None
    dom: int = 0
    eligible_incentives: tuple[Incentive, ...] = field(default_factory=tuple)

    @property
    def is_aged(self) -> bool:
        return self.dom > AGED_INVENTORY_DAYS

    @property
    def selling_price(self) -> Decimal:
        """Selling price, falling back to MSRP when the listing has none."""
        return self.price or self.msrp or Decimal("0")

    @property
    def sticker_price(self) -> Decimal:
        return self.msrp or Decimal("0")

    def describe(self) -> str:
        b = self.build
        return " ".join(part for part in (str(b.year), b.make, b.model, b.trim) if part)
