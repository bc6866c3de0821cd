"""SQLAlchemy ORM models for travel plans and trip legs."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in tests)
JsonDocument = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TravelPlanRow(Base):
    """Travel plan table - one row per generate/regenerate action."""

    __tablename__ = "travel_plan"
    __table_args__ = (Index("idx_travel_plan_user_created", "user_id", "created_at"),)

    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    request: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    narrative: Mapped[str] = mapped_column(Text, nullable=False)
    route: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    flight: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    visa: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    total_estimated_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    trip_legs: Mapped[list["TripLegRow"]] = relationship(
        "TripLegRow", back_populates="plan", cascade="all, delete-orphan"
    )


class TripLegRow(Base):
    """Trip leg table - optional itemized breakdown of a plan."""

    __tablename__ = "trip_leg"
    __table_args__ = (Index("idx_trip_leg_plan", "plan_id", "leg_number"),)

    leg_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("travel_plan.plan_id", ondelete="CASCADE"), nullable=False
    )
    leg_number: Mapped[int] = mapped_column(Integer, nullable=False)
    departure: Mapped[str] = mapped_column(Text, nullable=False)
    arrival: Mapped[str] = mapped_column(Text, nullable=False)
    transport_method: Mapped[str] = mapped_column(Text, nullable=False)
    estimated_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    duration: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    plan: Mapped["TravelPlanRow"] = relationship("TravelPlanRow", back_populates="trip_legs")
