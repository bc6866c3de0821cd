"""Tests for request and plan model validation."""

import pytest
from pydantic import ValidationError

from backend.app.models.common import Coordinates, TransportMode
from backend.app.models.plan import PlanRequest, RouteResult
from backend.app.models.trip_leg import TripLegCreate


def test_plan_request_strips_and_defaults_mode() -> None:
    request = PlanRequest(
        citizenship=" American ",
        residency_status="Citizen",
        departure_location="Toronto, Canada",
        destination_location="London, UK",
    )

    assert request.citizenship == "American"
    assert request.transport_mode == TransportMode.car


@pytest.mark.parametrize("field", ["citizenship", "departure_location", "destination_location"])
def test_plan_request_rejects_blank_fields(field: str) -> None:
    data = {
        "citizenship": "American",
        "residency_status": "Citizen",
        "departure_location": "Toronto",
        "destination_location": "London",
        field: "   ",
    }

    with pytest.raises(ValidationError):
        PlanRequest.model_validate(data)


def test_plan_request_rejects_unknown_mode() -> None:
    with pytest.raises(ValidationError):
        PlanRequest(
            citizenship="American",
            residency_status="Citizen",
            departure_location="Toronto",
            destination_location="London",
            transport_mode="boat",  # type: ignore[arg-type]
        )


def test_coordinates_bounds() -> None:
    with pytest.raises(ValidationError):
        Coordinates(lat=91, lng=0)
    with pytest.raises(ValidationError):
        Coordinates(lat=0, lng=-181)


def test_route_distance_cannot_be_negative() -> None:
    with pytest.raises(ValidationError):
        RouteResult(distance_km=-1, source="live")  # type: ignore[arg-type]


def test_trip_leg_requires_positive_number_and_cost() -> None:
    with pytest.raises(ValidationError):
        TripLegCreate(
            leg_number=0,
            departure="Toronto",
            arrival="Buffalo",
            transport_method="car",
            estimated_cost=10,  # type: ignore[arg-type]
            duration="2h",
        )
    with pytest.raises(ValidationError):
        TripLegCreate(
            leg_number=1,
            departure="Toronto",
            arrival="Buffalo",
            transport_method="car",
            estimated_cost=-1,  # type: ignore[arg-type]
            duration="2h",
        )
