#!/usr/bin/env python3
"""
Seed the vehicles table with deterministic random inventory.

Features:
- Deterministic: fixed seed → same inventory every run
- Idempotent: safe to run multiple times (clears before seeding)
- Realism-lite: MSRP by model band, selling price discounted with days on market
- A few units without pricing, to exercise the zero-payment path

Usage:
    python scripts/seed_vehicles.py
"""

from __future__ import annotations

import random
import string
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dealer_payments.infra.db.models.vehicle import VehicleRow
from dealer_payments.infra.db.session import get_session


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_VEHICLES = 40
UNPRICED_SHARE = 0.05  # Listings that arrive without price or MSRP


# ==============================================================================
# Inventory Data
# ==============================================================================

# model -> (trims, body style, MSRP band)
MODELS_BY_MAKE: dict[str, dict[str, tuple[tuple[str, ...], str, tuple[int, int]]]] = {
    "Ford": {
        "F-150": (("XL", "XLT", "Lariat"), "Pickup", (38_000, 62_000)),
        "Explorer": (("Base", "XLT", "ST"), "SUV", (38_000, 55_000)),
        "Escape": (("Active", "ST-Line"), "SUV", (29_000, 38_000)),
        "Bronco": (("Big Bend", "Outer Banks"), "SUV", (40_000, 55_000)),
        "Mustang": (("EcoBoost", "GT"), "Coupe", (32_000, 48_000)),
    },
    "Honda": {
        "Civic": (("LX", "Sport", "EX"), "Sedan", (24_000, 30_000)),
        "CR-V": (("LX", "EX", "EX-L"), "SUV", (30_000, 38_000)),
        "HR-V": (("LX", "Sport"), "SUV", (25_000, 30_000)),
    },
}

EXTERIOR_COLORS = ["Oxford White", "Agate Black", "Carbonized Gray", "Rapid Red", "Atlas Blue"]
INTERIOR_COLORS = ["Black", "Gray", "Sandstone"]
DRIVETRAINS = ["FWD", "AWD", "4WD"]

# Characters allowed in a VIN (no I, O, Q)
VIN_ALPHABET = "".join(c for c in string.ascii_uppercase + string.digits if c not in "IOQ")


# ==============================================================================
# Vehicle Generation
# ==============================================================================


def generate_vin() -> str:
    return "".join(random.choice(VIN_ALPHABET) for _ in range(17))


def calculate_pricing(msrp_band: tuple[int, int], dom: int) -> tuple[Decimal, Decimal]:
    """
    MSRP within the model band; selling price discounted with days on market.

    Aged units (60+ days) get a deeper discount.
    """
    msrp = Decimal(random.randint(*msrp_band) // 100 * 100)

    discount = Decimal(str(random.uniform(0.02, 0.05)))
    if dom > 60:
        discount += Decimal("0.03")

    price = (msrp * (Decimal("1") - discount) / 100).quantize(Decimal("1")) * 100
    return msrp, price


def generate_vehicle(index: int, year: int) -> VehicleRow:
    make = random.choice(list(MODELS_BY_MAKE))
    model = random.choice(list(MODELS_BY_MAKE[make]))
    trims, body_style, msrp_band = MODELS_BY_MAKE[make][model]

    # Days on market: mostly fresh units, some aged
    dom_range = random.choices([(0, 30), (31, 60), (61, 150)], weights=[6, 3, 1], k=1)[0]
    dom = random.randint(*dom_range)
    msrp, price = calculate_pricing(msrp_band, dom)

    unpriced = random.random() < UNPRICED_SHARE

    return VehicleRow(
        vin=generate_vin(),
        stock_no=f"{make[0]}{1000 + index}",
        inventory_type="new",
        price=None if unpriced else price,
        msrp=None if unpriced else msrp,
        dom=dom,
        year=year,
        make=make,
        model=model,
        trim=random.choice(trims),
        body_style=body_style,
        drivetrain=random.choice(DRIVETRAINS),
        exterior_color=random.choice(EXTERIOR_COLORS),
        interior_color=random.choice(INTERIOR_COLORS),
        eligible_incentives=[],
    )


def seed_vehicles(num_vehicles: int = NUM_VEHICLES, seed: int = RANDOM_SEED) -> None:
    """
    Seed the database with random inventory.

    Args:
        num_vehicles: Number of vehicles to generate
        seed: Random seed for deterministic results
    """
    random.seed(seed)
    year = date.today().year

    print(f"Seeding database with {num_vehicles} vehicles (seed={seed})...")

    with get_session() as session:
        deleted_count = session.query(VehicleRow).delete()
        print(f"   Deleted {deleted_count} existing vehicles")

        vehicles = [generate_vehicle(i, year) for i in range(num_vehicles)]

        session.add_all(vehicles)
        session.flush()

        print(f"Seeded {len(vehicles)} vehicles")

        for i, v in enumerate(vehicles[:5], 1):
            pricing = f"${v.price:,.0f} (MSRP ${v.msrp:,.0f})" if v.price is not None else "no pricing"
            print(f"   {i}. {v.stock_no} {v.year} {v.make} {v.model} {v.trim} - {pricing}, {v.dom} days")

        if len(vehicles) > 5:
            print(f"   ... and {len(vehicles) - 5} more")


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_vehicles()
    except Exception as e:
        print(f"Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
