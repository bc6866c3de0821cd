"""SQL implementations of repository interfaces."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import TravelPlanRow, TripLegRow
from backend.app.db.queries import select_plans, select_trip_legs
from backend.app.db.repositories import PlanPersistenceError
from backend.app.models.plan import (
    FlightResult,
    PlanRequest,
    RouteResult,
    TravelPlan,
    VisaResult,
)
from backend.app.models.trip_leg import TripLeg, TripLegCreate

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # sqlite drops tzinfo on round trip
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _plan_from_row(row: TravelPlanRow) -> TravelPlan:
    return TravelPlan(
        plan_id=row.plan_id,
        owner=row.user_id,
        request=PlanRequest.model_validate(row.request),
        narrative=row.narrative,
        route=RouteResult.model_validate(row.route),
        flight=FlightResult.model_validate(row.flight),
        visa=VisaResult.model_validate(row.visa),
        total_estimated_cost=row.total_estimated_cost,
        status_message=row.status_message,
        created_at=_as_utc(row.created_at),
    )


def _leg_from_row(row: TripLegRow) -> TripLeg:
    return TripLeg(
        leg_id=row.leg_id,
        plan_id=row.plan_id,
        leg_number=row.leg_number,
        departure=row.departure,
        arrival=row.arrival,
        transport_method=row.transport_method,
        estimated_cost=row.estimated_cost,
        duration=row.duration,
        notes=row.notes,
    )


class SqlPlanRepository:
    """SQL implementation of PlanRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save_plan(self, plan: TravelPlan, ctx: RequestContext) -> None:
        """Insert a new travel plan."""
        if plan.owner != ctx.user_id:
            raise PlanPersistenceError("plan owner does not match request context")

        row = TravelPlanRow(
            plan_id=plan.plan_id,
            user_id=ctx.user_id,
            request=plan.request.model_dump(mode="json"),
            narrative=plan.narrative,
            route=plan.route.model_dump(mode="json"),
            flight=plan.flight.model_dump(mode="json"),
            visa=plan.visa.model_dump(mode="json"),
            total_estimated_cost=plan.total_estimated_cost,
            status_message=plan.status_message,
            created_at=plan.created_at,
        )

        try:
            self._session.add(row)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"[save_plan] plan_id={plan.plan_id} insert failed: {e}")
            raise PlanPersistenceError(f"could not store plan {plan.plan_id}") from e

    async def get_plan(self, plan_id: uuid.UUID, ctx: RequestContext) -> TravelPlan | None:
        """Get plan by ID."""
        result = await self._session.execute(
            select_plans(ctx).where(TravelPlanRow.plan_id == plan_id)
        )
        row = result.scalar_one_or_none()

        if row is None:
            return None

        return _plan_from_row(row)

    async def list_plans(self, ctx: RequestContext, limit: int = 10) -> list[TravelPlan]:
        """List recent plans for user."""
        result = await self._session.execute(
            select_plans(ctx).order_by(TravelPlanRow.created_at.desc()).limit(limit)
        )
        return [_plan_from_row(row) for row in result.scalars().all()]


class SqlTripLegRepository:
    """SQL implementation of TripLegRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_trip_leg(
        self, plan_id: uuid.UUID, leg: TripLegCreate, ctx: RequestContext
    ) -> TripLeg | None:
        """Attach a leg to one of the user's plans."""
        owned = await self._session.execute(
            select_plans(ctx).where(TravelPlanRow.plan_id == plan_id)
        )
        if owned.scalar_one_or_none() is None:
            return None

        leg_id = uuid.uuid4()
        self._session.add(TripLegRow(leg_id=leg_id, plan_id=plan_id, **leg.model_dump()))
        await self._session.commit()

        return TripLeg(leg_id=leg_id, plan_id=plan_id, **leg.model_dump())

    async def list_trip_legs(self, plan_id: uuid.UUID, ctx: RequestContext) -> list[TripLeg]:
        """List legs of a plan ordered by leg number."""
        result = await self._session.execute(
            select_trip_legs(ctx)
            .where(TripLegRow.plan_id == plan_id)
            .order_by(TripLegRow.leg_number)
        )
        return [_leg_from_row(row) for row in result.scalars().all()]
