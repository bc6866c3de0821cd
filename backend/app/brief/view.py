"""Travel brief - display-ready view of a stored TravelPlan."""

from decimal import Decimal

from pydantic import BaseModel

from backend.app.brief.checklist import extract_document_checklist
from backend.app.models.common import Provenance
from backend.app.models.plan import TravelPlan

NOT_AVAILABLE = "N/A"
ESTIMATED_NOTE = "Some data is estimated."
COST_INCLUDES = "Includes flight estimates, potential accommodation, and miscellaneous expenses."
NO_DOCUMENTS = "Document information unavailable or not applicable."

BORDER_CROSSING_TIPS = [
    "Arrive at border crossings during business hours when possible.",
    "Have all documents organized and easily accessible.",
    "Carry sufficient cash (local currency if possible) for border fees and unexpected expenses.",
    "Check current border status, wait times, and any specific entry/exit requirements "
    "(e.g., health declarations) online before you go.",
    "Be polite and patient with border officials.",
]


class BriefFlightSegment(BaseModel):
    """One flight segment line."""

    route: str
    airline: str
    duration: str
    price: str


class TravelBrief(BaseModel):
    """Formatted plan summary; every field is ready to display."""

    plan_id: str
    heading: str
    status_message: str | None
    total_cost: str
    cost_badge: str | None
    cost_note: str
    route_badge: str | None
    distance: str
    duration: str
    transport_methods: str
    route_error: str | None
    flight_badge: str | None
    flight_segments: list[BriefFlightSegment]
    flight_total: str
    flight_error: str | None
    visa_badge: str | None
    visa_required: str
    visa_type: str | None
    processing_time: str | None
    visa_documents: list[str]
    visa_notes: str | None
    visa_error: str | None
    document_checklist: list[str]
    border_crossing_tips: list[str]


def format_currency(amount: Decimal) -> str:
    """US-dollar formatting, e.g. ``$1,234.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_duration(minutes: int) -> str:
    """Minutes as ``Xh Ym``; non-positive values are not available."""
    if minutes <= 0:
        return NOT_AVAILABLE
    return f"{minutes // 60}h {minutes % 60}m"


def source_badge(source: Provenance, kind: str) -> str | None:
    """Badge label for a provenance tag; live data carries no badge."""
    if source == Provenance.error:
        return f"{kind} Error"
    if source == Provenance.fallback:
        return "Estimated"
    if source == Provenance.mock:
        return "Mock Data"
    return None


def _cost_source(plan: TravelPlan) -> Provenance:
    route, flight = plan.route.source, plan.flight.source
    if route == Provenance.live and flight == Provenance.live:
        return Provenance.live
    if Provenance.error in (route, flight):
        return Provenance.error
    return Provenance.fallback


def build_travel_brief(plan: TravelPlan) -> TravelBrief:
    """Build the display view for a plan.

    Args:
        plan: Stored travel plan

    Returns:
        TravelBrief with formatted cost, route, flight and visa sections
    """
    route, flight, visa = plan.route, plan.flight, plan.visa
    request = plan.request

    cost_note = COST_INCLUDES
    if route.source != Provenance.live or flight.source != Provenance.live:
        cost_note = f"{cost_note} {ESTIMATED_NOTE}"

    methods = [m for m in route.transport_methods if m]
    transport_methods = (
        ", ".join(methods) if methods and methods[0] != "unknown" else NOT_AVAILABLE
    )

    visa_known = visa.source != Provenance.error
    if visa_known:
        visa_required = "Yes" if visa.required else "No"
    else:
        visa_required = "Info N/A"

    return TravelBrief(
        plan_id=str(plan.plan_id),
        heading=(
            f"For travel from {request.departure_location} to "
            f"{request.destination_location} via {request.transport_mode.value}."
        ),
        status_message=plan.status_message,
        total_cost=format_currency(plan.total_estimated_cost),
        cost_badge=source_badge(_cost_source(plan), "Cost"),
        cost_note=cost_note,
        route_badge=source_badge(route.source, "Route"),
        distance=f"{route.distance_km} km" if route.distance_km > 0 else NOT_AVAILABLE,
        duration=format_duration(route.duration_minutes),
        transport_methods=transport_methods,
        route_error=route.error,
        flight_badge=source_badge(flight.source, "Flight"),
        flight_segments=[
            BriefFlightSegment(
                route=f"{segment.departure_code} → {segment.arrival_code}",
                airline=segment.airline_code,
                duration=segment.duration,
                price=format_currency(segment.price),
            )
            for segment in flight.segments
        ],
        flight_total=format_currency(flight.total_price),
        flight_error=flight.error,
        visa_badge=source_badge(visa.source, "Visa"),
        visa_required=visa_required,
        visa_type=visa.visa_type if visa_known else None,
        processing_time=visa.processing_time if visa_known else None,
        visa_documents=list(visa.documents) if visa_known and visa.documents else [NO_DOCUMENTS],
        visa_notes=visa.notes,
        visa_error=visa.error,
        document_checklist=extract_document_checklist(plan.narrative),
        border_crossing_tips=list(BORDER_CROSSING_TIPS),
    )
