"""Ownership-safe query helpers."""

from sqlalchemy import Select, select

from backend.app.db.context import RequestContext
from backend.app.db.models import TravelPlanRow, TripLegRow


def select_plans(ctx: RequestContext) -> Select[tuple[TravelPlanRow]]:
    """Select travel_plan rows with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(TravelPlanRow).where(TravelPlanRow.user_id == ctx.user_id)


def select_trip_legs(ctx: RequestContext) -> Select[tuple[TripLegRow]]:
    """Select trip_leg rows whose parent plan belongs to the user.

    Args:
        ctx: Request context with user_id

    Returns:
        Select joined to travel_plan and filtered by user_id
    """
    return (
        select(TripLegRow)
        .join(TravelPlanRow, TripLegRow.plan_id == TravelPlanRow.plan_id)
        .where(TravelPlanRow.user_id == ctx.user_id)
    )
