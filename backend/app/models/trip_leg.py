"""Trip leg models - optional itemized breakdown attached to a plan."""

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class TripLegCreate(BaseModel):
    """Request body for adding a leg to a plan."""

    leg_number: int = Field(..., ge=1)
    departure: str = Field(..., min_length=1)
    arrival: str = Field(..., min_length=1)
    transport_method: str = Field(..., min_length=1)
    estimated_cost: Decimal = Field(..., ge=0)
    duration: str = Field(..., min_length=1)
    notes: str | None = None


class TripLeg(BaseModel):
    """Stored trip leg."""

    model_config = ConfigDict(frozen=True)

    leg_id: uuid.UUID
    plan_id: uuid.UUID
    leg_number: int
    departure: str
    arrival: str
    transport_method: str
    estimated_cost: Decimal
    duration: str
    notes: str | None = None
