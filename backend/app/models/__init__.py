"""Models package - re-exports for convenience."""

from backend.app.models.common import Coordinates, Provenance, TransportMode
from backend.app.models.plan import (
    BorderCrossing,
    FlightResult,
    FlightSegment,
    PlanRequest,
    RouteResult,
    TravelPlan,
    VisaResult,
)
from backend.app.models.trip_leg import TripLeg, TripLegCreate

__all__ = [
    # Common
    "Coordinates",
    "Provenance",
    "TransportMode",
    # Plan
    "PlanRequest",
    "BorderCrossing",
    "RouteResult",
    "FlightSegment",
    "FlightResult",
    "VisaResult",
    "TravelPlan",
    # Trip legs
    "TripLeg",
    "TripLegCreate",
]
