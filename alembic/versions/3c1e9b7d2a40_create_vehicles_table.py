"""Create vehicles table

Revision ID: 3c1e9b7d2a40
Revises:
Create Date: 2026-10-18 09:12:41.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7d2a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "vehicles",
        sa.Column("vin", sa.String(length=17), primary_key=True),
        sa.Column("stock_no", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("inventory_type", sa.String(length=10), nullable=False, server_default="new"),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("msrp", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("dom", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("make", sa.String(length=50), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("trim", sa.String(length=100), nullable=True),
        sa.Column("body_style", sa.String(length=50), nullable=True),
        sa.Column("engine", sa.String(length=100), nullable=True),
        sa.Column("transmission", sa.String(length=50), nullable=True),
        sa.Column("drivetrain", sa.String(length=20), nullable=True),
        sa.Column("exterior_color", sa.String(length=50), nullable=True),
        sa.Column("interior_color", sa.String(length=50), nullable=True),
        sa.Column("eligible_incentives", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_vehicles_stock_no", "vehicles", ["stock_no"])
    op.create_index("ix_vehicles_make_model_year", "vehicles", ["make", "model", "year"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_vehicles_make_model_year", table_name="vehicles")
    op.drop_index("ix_vehicles_stock_no", table_name="vehicles")
    op.drop_table("vehicles")
