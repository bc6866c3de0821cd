"""Travel plan endpoints - generate, regenerate, read, brief, checklist and trip legs."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.adapters.airports import load_airport_codes
from backend.app.adapters.visa import load_visa_rules
from backend.app.api.auth import get_current_context
from backend.app.brief.checklist import extract_document_checklist
from backend.app.brief.view import TravelBrief, build_travel_brief
from backend.app.config import ProviderConfig, get_settings
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.repositories import PlanRepository, TripLegRepository
from backend.app.db.sql_repositories import SqlPlanRepository, SqlTripLegRepository
from backend.app.llm.client import get_narrative_client
from backend.app.models.common import Provenance, TransportMode
from backend.app.models.plan import PlanRequest, TravelPlan
from backend.app.models.trip_leg import TripLeg, TripLegCreate
from backend.app.orchestration.aggregator import PlanAggregator

router = APIRouter(prefix="/plans", tags=["plans"])
logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 50


class RegenerateRequest(BaseModel):
    """Optional body for POST /plans/{plan_id}/regenerate."""

    transport_mode: TransportMode | None = None


class ChecklistResponse(BaseModel):
    """Response for GET /plans/{plan_id}/checklist."""

    plan_id: str
    items: list[str]
    from_narrative: list[str]
    from_visa: list[str]


def get_provider_config() -> ProviderConfig:
    """Provider configuration snapshot from settings."""
    return ProviderConfig.from_settings(get_settings())


def get_plan_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PlanRepository:
    return SqlPlanRepository(session)


def get_trip_leg_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TripLegRepository:
    return SqlTripLegRepository(session)


def get_aggregator(
    config: Annotated[ProviderConfig, Depends(get_provider_config)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
) -> PlanAggregator:
    """Wire the aggregator with static tables and the narrative client."""
    settings = get_settings()
    return PlanAggregator(
        config,
        plans,
        airport_codes=load_airport_codes(settings.airport_codes_path),
        visa_rules=load_visa_rules(settings.visa_rules_path),
        narrative_client=get_narrative_client(config),
    )


def _parse_plan_id(plan_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(plan_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid plan_id format",
        ) from e


async def _require_plan(plans: PlanRepository, plan_id: str, ctx: RequestContext) -> TravelPlan:
    plan = await plans.get_plan(_parse_plan_id(plan_id), ctx)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Plan not found",
        )
    return plan


@router.post("", response_model=TravelPlan, status_code=status.HTTP_201_CREATED)
async def create_plan(
    request: PlanRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    aggregator: Annotated[PlanAggregator, Depends(get_aggregator)],
) -> TravelPlan:
    """Generate and store a travel plan.

    Provider failures never fail the request; they show up as error-tagged
    sections and in status_message.

    Args:
        request: Plan request (citizenship, residency, locations, mode)
        ctx: Request context (user_id)
        aggregator: Plan aggregator

    Returns:
        The stored TravelPlan
    """
    return await aggregator.generate(request, ctx)


@router.get("", response_model=list[TravelPlan])
async def list_plans(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
    limit: Annotated[int, Query(ge=1, le=MAX_LIST_LIMIT)] = 10,
) -> list[TravelPlan]:
    """List the caller's most recent plans, newest first."""
    return await plans.list_plans(ctx, limit=limit)


@router.get("/{plan_id}", response_model=TravelPlan)
async def get_plan(
    plan_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
) -> TravelPlan:
    """Get a stored plan.

    Raises:
        HTTPException: 400 for a malformed id, 404 if not found for this user
    """
    return await _require_plan(plans, plan_id, ctx)


@router.post(
    "/{plan_id}/regenerate",
    response_model=TravelPlan,
    status_code=status.HTTP_201_CREATED,
)
async def regenerate_plan(
    plan_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
    aggregator: Annotated[PlanAggregator, Depends(get_aggregator)],
    body: RegenerateRequest | None = None,
) -> TravelPlan:
    """Generate a new plan from a stored plan's request.

    The stored plan is not modified; a new plan with a new id is created.

    Args:
        plan_id: Plan to regenerate from
        ctx: Request context (user_id)
        plans: Plan repository
        aggregator: Plan aggregator
        body: Optional transport mode override

    Returns:
        The newly stored TravelPlan
    """
    previous = await _require_plan(plans, plan_id, ctx)
    transport_mode = body.transport_mode if body else None
    return await aggregator.regenerate(previous, ctx, transport_mode=transport_mode)


@router.get("/{plan_id}/brief", response_model=TravelBrief)
async def get_plan_brief(
    plan_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
) -> TravelBrief:
    """Display-ready travel brief for a stored plan."""
    return build_travel_brief(await _require_plan(plans, plan_id, ctx))


@router.get("/{plan_id}/checklist", response_model=ChecklistResponse)
async def get_plan_checklist(
    plan_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
) -> ChecklistResponse:
    """Document checklist from the narrative merged with the visa document list.

    Visa documents are skipped when the visa section is an error placeholder.
    """
    plan = await _require_plan(plans, plan_id, ctx)

    from_narrative = extract_document_checklist(plan.narrative)
    from_visa = list(plan.visa.documents) if plan.visa.source != Provenance.error else []

    # Case-insensitive merge, first spelling wins
    merged: dict[str, str] = {}
    for item in [*from_visa, *from_narrative]:
        merged.setdefault(item.lower(), item)

    return ChecklistResponse(
        plan_id=str(plan.plan_id),
        items=list(merged.values()),
        from_narrative=from_narrative,
        from_visa=from_visa,
    )


@router.post("/{plan_id}/legs", response_model=TripLeg, status_code=status.HTTP_201_CREATED)
async def add_trip_leg(
    plan_id: str,
    leg: TripLegCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    legs: Annotated[TripLegRepository, Depends(get_trip_leg_repository)],
) -> TripLeg:
    """Attach an itemized leg to a plan.

    Raises:
        HTTPException: 400 for a malformed id, 404 if the plan is not found
    """
    stored = await legs.add_trip_leg(_parse_plan_id(plan_id), leg, ctx)
    if stored is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Plan not found",
        )
    return stored


@router.get("/{plan_id}/legs", response_model=list[TripLeg])
async def list_trip_legs(
    plan_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    plans: Annotated[PlanRepository, Depends(get_plan_repository)],
    legs: Annotated[TripLegRepository, Depends(get_trip_leg_repository)],
) -> list[TripLeg]:
    """List a plan's legs ordered by leg number."""
    plan = await _require_plan(plans, plan_id, ctx)
    return await legs.list_trip_legs(plan.plan_id, ctx)
