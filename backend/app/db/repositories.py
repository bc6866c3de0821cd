"""Repository protocol interfaces for data access."""

from typing import Protocol
from uuid import UUID

from backend.app.db.context import RequestContext
from backend.app.models.plan import TravelPlan
from backend.app.models.trip_leg import TripLeg, TripLegCreate


class PlanPersistenceError(Exception):
    """A travel plan could not be stored.

    The one failure the plan aggregator does not absorb.
    """

    pass


class PlanRepository(Protocol):
    """Repository for travel plan records."""

    async def save_plan(self, plan: TravelPlan, ctx: RequestContext) -> None:
        """Insert a new travel plan.

        Args:
            plan: Plan to store; plan.owner must equal ctx.user_id
            ctx: Request context

        Raises:
            PlanPersistenceError: If the insert fails (nothing is stored)
        """
        ...

    async def get_plan(self, plan_id: UUID, ctx: RequestContext) -> TravelPlan | None:
        """Get plan by ID.

        Args:
            plan_id: Plan ID
            ctx: Request context (enforces ownership)

        Returns:
            Plan or None if not found
        """
        ...

    async def list_plans(self, ctx: RequestContext, limit: int = 10) -> list[TravelPlan]:
        """List the user's most recent plans, newest first.

        Args:
            ctx: Request context (enforces ownership)
            limit: Maximum number of results

        Returns:
            List of plans
        """
        ...


class TripLegRepository(Protocol):
    """Repository for trip legs attached to a plan."""

    async def add_trip_leg(
        self, plan_id: UUID, leg: TripLegCreate, ctx: RequestContext
    ) -> TripLeg | None:
        """Attach a leg to one of the user's plans.

        Returns:
            Stored leg, or None if the plan does not exist for this user
        """
        ...

    async def list_trip_legs(self, plan_id: UUID, ctx: RequestContext) -> list[TripLeg]:
        """List legs of a plan ordered by leg number.

        Returns:
            Legs, empty if the plan has none or is not owned by the user
        """
        ...
