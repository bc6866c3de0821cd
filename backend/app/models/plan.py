"""Plan models - request, per-provider sub-results and the composite TravelPlan."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.models.common import Coordinates, Provenance, TransportMode


class PlanRequest(BaseModel):
    """User input for one plan generation."""

    model_config = ConfigDict(frozen=True)

    citizenship: str = Field(..., min_length=1)
    residency_status: str = Field(..., min_length=1)
    departure_location: str = Field(..., min_length=1)
    destination_location: str = Field(..., min_length=1)
    transport_mode: TransportMode = TransportMode.car

    @field_validator(
        "citizenship", "residency_status", "departure_location", "destination_location"
    )
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values and strip surrounding space."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class BorderCrossing(BaseModel):
    """Named border crossing point along a route."""

    model_config = ConfigDict(frozen=True)

    name: str
    coordinates: Coordinates


class RouteResult(BaseModel):
    """Ground route summary between departure and destination."""

    model_config = ConfigDict(frozen=True)

    distance_km: int = Field(0, ge=0)
    duration_minutes: int = Field(0, ge=0)
    transport_methods: list[str] = Field(default_factory=list)
    border_crossings: list[BorderCrossing] = Field(default_factory=list)
    source: Provenance
    error: str | None = None


class FlightSegment(BaseModel):
    """One leg of the best flight offer."""

    model_config = ConfigDict(frozen=True)

    departure_code: str
    arrival_code: str
    price: Decimal
    duration: str = Field(..., description="ISO-8601 duration, e.g. PT7H10M")
    airline_code: str


class FlightResult(BaseModel):
    """Flight search summary."""

    model_config = ConfigDict(frozen=True)

    segments: list[FlightSegment] = Field(default_factory=list)
    total_price: Decimal = Decimal("0")
    source: Provenance
    error: str | None = None


class VisaResult(BaseModel):
    """Visa requirement record for a citizenship/destination pair."""

    model_config = ConfigDict(frozen=True)

    required: bool
    visa_type: str | None = None
    processing_time: str | None = None
    documents: list[str] = Field(default_factory=list)
    notes: str | None = None
    source: Provenance
    error: str | None = None


class TravelPlan(BaseModel):
    """Composite plan persisted and returned for one generation."""

    model_config = ConfigDict(frozen=True)

    plan_id: uuid.UUID
    owner: uuid.UUID
    request: PlanRequest
    narrative: str
    route: RouteResult
    flight: FlightResult
    visa: VisaResult
    total_estimated_cost: Decimal
    status_message: str | None = None
    created_at: datetime
