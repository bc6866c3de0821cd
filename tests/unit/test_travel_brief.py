"""Tests for the travel brief view model."""

import uuid
from decimal import Decimal

from backend.app.brief.view import (
    BORDER_CROSSING_TIPS,
    NO_DOCUMENTS,
    build_travel_brief,
    format_currency,
    format_duration,
    source_badge,
)
from backend.app.models.common import Provenance
from backend.app.models.plan import FlightResult, RouteResult, VisaResult
from tests.factories import make_plan

OWNER = uuid.UUID("00000000-0000-0000-0000-00000000000a")


def test_format_currency() -> None:
    assert format_currency(Decimal("1234")) == "$1,234.00"
    assert format_currency(Decimal("740.5")) == "$740.50"
    assert format_currency(Decimal("0")) == "$0.00"


def test_format_duration() -> None:
    assert format_duration(520) == "8h 40m"
    assert format_duration(45) == "0h 45m"
    assert format_duration(0) == "N/A"
    assert format_duration(-5) == "N/A"


def test_source_badges() -> None:
    assert source_badge(Provenance.live, "Route") is None
    assert source_badge(Provenance.error, "Route") == "Route Error"
    assert source_badge(Provenance.fallback, "Flight") == "Estimated"
    assert source_badge(Provenance.mock, "Visa") == "Mock Data"


def test_brief_for_live_plan() -> None:
    plan = make_plan(OWNER, narrative="Required Documents:\n- Valid passport\n")

    brief = build_travel_brief(plan)

    assert brief.total_cost == "$740.50"
    assert brief.cost_badge is None
    assert "Some data is estimated." not in brief.cost_note
    assert brief.route_badge is None
    assert brief.distance == "790 km"
    assert brief.duration == "8h 40m"
    assert brief.transport_methods == "car"
    assert brief.flight_badge is None
    assert brief.flight_segments[0].route == "YYZ → JFK"
    assert brief.flight_segments[0].price == "$240.50"
    assert brief.visa_badge == "Mock Data"
    assert brief.visa_required == "No"
    assert brief.document_checklist == ["Valid passport"]
    assert brief.border_crossing_tips == BORDER_CROSSING_TIPS
    assert brief.heading == (
        "For travel from Toronto, Canada to New York City, USA via car."
    )


def test_brief_for_degraded_plan() -> None:
    plan = make_plan(OWNER).model_copy(
        update={
            "route": RouteResult(
                transport_methods=["unknown"],
                source=Provenance.error,
                error="HERE API key not configured. Route data is unavailable.",
            ),
            "flight": FlightResult(source=Provenance.error, error="no credentials"),
            "visa": VisaResult(required=True, source=Provenance.error, error="lookup failed"),
            "total_estimated_cost": Decimal("500"),
        }
    )

    brief = build_travel_brief(plan)

    assert brief.total_cost == "$500.00"
    assert brief.cost_badge == "Cost Error"
    assert brief.cost_note.endswith("Some data is estimated.")
    assert brief.route_badge == "Route Error"
    assert brief.distance == "N/A"
    assert brief.duration == "N/A"
    assert brief.transport_methods == "N/A"
    assert brief.flight_badge == "Flight Error"
    assert brief.flight_segments == []
    assert brief.visa_badge == "Visa Error"
    assert brief.visa_required == "Info N/A"
    assert brief.visa_type is None
    assert brief.visa_documents == [NO_DOCUMENTS]
    assert brief.visa_error == "lookup failed"


def test_cost_badge_is_estimated_when_nothing_failed_but_not_all_live() -> None:
    plan = make_plan(OWNER).model_copy(
        update={"flight": FlightResult(source=Provenance.fallback)}
    )

    brief = build_travel_brief(plan)

    assert brief.cost_badge == "Estimated"
    assert brief.flight_badge == "Estimated"
