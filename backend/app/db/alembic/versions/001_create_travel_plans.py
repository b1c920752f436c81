"""create travel plans table

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add travel_plans table for generated itineraries."""
    op.create_table(
        "travel_plans",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True, nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("age_group", sa.String(50), nullable=True),
        sa.Column("group_size", sa.Integer, nullable=True),
        sa.Column("purpose", sa.String(100), nullable=True),
        sa.Column("travel_type", sa.String(100), nullable=True),
        sa.Column(
            "plan_data", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False
        ),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("view_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_index(
        "idx_travel_plans_public_created", "travel_plans", ["is_public", "created_at"]
    )
    op.create_index("idx_travel_plans_deleted_at", "travel_plans", ["deleted_at"])


def downgrade() -> None:
    """Remove travel_plans table."""
    op.drop_index("idx_travel_plans_deleted_at", table_name="travel_plans")
    op.drop_index("idx_travel_plans_public_created", table_name="travel_plans")
    op.drop_table("travel_plans")
