from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from dealer_payments.infra.db.models.base import Base


class VehicleRow(Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        Index("ix_vehicles_stock_no", "stock_no"),
        Index("ix_vehicles_make_model_year", "make", "model", "year"),
    )

    vin: Mapped[str] = mapped_column(String(17), primary_key=True)
    stock_no: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    inventory_type: Mapped[str] = mapped_column(String(10), nullable=False, default="new")

    price: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    msrp: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    dom: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    make: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    trim: Mapped[str | None] = mapped_column(String(100), nullable=True)
    body_style: Mapped[str | None] = mapped_column(String(50), nullable=True)
    engine: Mapped[str | None] = mapped_column(String(100), nullable=True)
    transmission: Mapped[str | None] = mapped_column(String(50), nullable=True)
    drivetrain: Mapped[str | None] = mapped_column(String(20), nullable=True)
    exterior_color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    interior_color: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # [{"id", "type", "name", "amount", "stackable"}], resolved upstream
    eligible_incentives: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
