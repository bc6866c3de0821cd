"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates:
- travel_plan (one row per generate/regenerate)
- trip_leg (optional itemized legs of a plan)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JsonDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create travel_plan and trip_leg."""
    op.create_table(
        "travel_plan",
        sa.Column("plan_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("request", JsonDocument, nullable=False),
        sa.Column("narrative", sa.Text(), nullable=False),
        sa.Column("route", JsonDocument, nullable=False),
        sa.Column("flight", JsonDocument, nullable=False),
        sa.Column("visa", JsonDocument, nullable=False),
        sa.Column("total_estimated_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("status_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_travel_plan_user_created", "travel_plan", ["user_id", "created_at"])

    op.create_table(
        "trip_leg",
        sa.Column("leg_id", sa.Uuid(), primary_key=True),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("leg_number", sa.Integer(), nullable=False),
        sa.Column("departure", sa.Text(), nullable=False),
        sa.Column("arrival", sa.Text(), nullable=False),
        sa.Column("transport_method", sa.Text(), nullable=False),
        sa.Column("estimated_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("duration", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["plan_id"], ["travel_plan.plan_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_trip_leg_plan", "trip_leg", ["plan_id", "leg_number"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_trip_leg_plan", table_name="trip_leg")
    op.drop_table("trip_leg")
    op.drop_index("idx_travel_plan_user_created", table_name="travel_plan")
    op.drop_table("travel_plan")
