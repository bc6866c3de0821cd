"""In-memory implementations of repository interfaces."""

import uuid

from backend.app.db.context import RequestContext
from backend.app.db.repositories import PlanPersistenceError
from backend.app.models.plan import TravelPlan
from backend.app.models.trip_leg import TripLeg, TripLegCreate


class InMemoryPlanRepository:
    """In-memory implementation of PlanRepository."""

    def __init__(self) -> None:
        self._plans: dict[uuid.UUID, TravelPlan] = {}

    async def save_plan(self, plan: TravelPlan, ctx: RequestContext) -> None:
        """Insert a new travel plan."""
        if plan.owner != ctx.user_id:
            raise PlanPersistenceError("plan owner does not match request context")
        if plan.plan_id in self._plans:
            raise PlanPersistenceError(f"plan {plan.plan_id} already exists")

        self._plans[plan.plan_id] = plan

    async def get_plan(self, plan_id: uuid.UUID, ctx: RequestContext) -> TravelPlan | None:
        """Get plan by ID."""
        plan = self._plans.get(plan_id)

        if plan is None:
            return None

        # Enforce ownership
        if plan.owner != ctx.user_id:
            return None

        return plan

    async def list_plans(self, ctx: RequestContext, limit: int = 10) -> list[TravelPlan]:
        """List recent plans for user."""
        owned = [p for p in self._plans.values() if p.owner == ctx.user_id]
        owned.sort(key=lambda p: p.created_at, reverse=True)
        return owned[:limit]


class InMemoryTripLegRepository:
    """In-memory implementation of TripLegRepository."""

    def __init__(self, plans: InMemoryPlanRepository) -> None:
        self._plans = plans
        self._legs: dict[uuid.UUID, list[TripLeg]] = {}

    async def add_trip_leg(
        self, plan_id: uuid.UUID, leg: TripLegCreate, ctx: RequestContext
    ) -> TripLeg | None:
        """Attach a leg to one of the user's plans."""
        if await self._plans.get_plan(plan_id, ctx) is None:
            return None

        stored = TripLeg(leg_id=uuid.uuid4(), plan_id=plan_id, **leg.model_dump())
        self._legs.setdefault(plan_id, []).append(stored)
        return stored

    async def list_trip_legs(self, plan_id: uuid.UUID, ctx: RequestContext) -> list[TripLeg]:
        """List legs of a plan ordered by leg number."""
        if await self._plans.get_plan(plan_id, ctx) is None:
            return []

        return sorted(self._legs.get(plan_id, []), key=lambda leg: leg.leg_number)
