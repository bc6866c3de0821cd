"""Plan aggregator - turns one PlanRequest into one persisted TravelPlan.

Geocoding, routing, flight search, visa rules and the narrative generator
are each allowed to fail on their own. Every failure becomes an
error-tagged sub-result plus a status fragment; the request as a whole
only fails when the plan cannot be stored.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import httpx

from backend.app.adapters import amadeus, here
from backend.app.adapters.result import ProviderResult, guarded_call
from backend.app.adapters.visa import lookup_visa_requirements
from backend.app.config import ProviderConfig
from backend.app.db.context import RequestContext
from backend.app.db.repositories import PlanPersistenceError, PlanRepository
from backend.app.llm.client import NarrativeClient, NarrativeGenerationError
from backend.app.models.common import Coordinates, Provenance, TransportMode
from backend.app.models.plan import FlightResult, PlanRequest, RouteResult, TravelPlan, VisaResult
from backend.app.orchestration.cost import estimate_total_cost
from backend.app.orchestration.status import (
    COST_ESTIMATE_NOTE,
    OVERALL_FAILURE_NOTICE,
    VISA_MOCK_NOTE,
    StatusMessage,
)
from backend.app.utils.metrics import PrometheusProviderMetrics

logger = logging.getLogger(__name__)

FALLBACK_NARRATIVE = (
    "Unable to generate AI travel plan at this time. "
    "Please check with relevant authorities for travel requirements."
)
APOLOGY_NARRATIVE = (
    "We're sorry, something went wrong while preparing your travel plan. "
    "Please check with relevant authorities for travel requirements and try again later."
)


@dataclass(frozen=True)
class _Outcome:
    """A sub-result together with the status fragment it contributes."""

    result: RouteResult | FlightResult
    fragment: str | None = None


def _route_error(transport_mode: TransportMode, detail: str) -> RouteResult:
    return RouteResult(
        transport_methods=[transport_mode.value], source=Provenance.error, error=detail
    )


def _flight_error(detail: str) -> FlightResult:
    return FlightResult(source=Provenance.error, error=detail)


def _visa_error(detail: str) -> VisaResult:
    return VisaResult(
        required=True,
        documents=["Valid passport", "Visa application"],
        source=Provenance.error,
        error=detail,
    )


class PlanAggregator:
    """Best-effort aggregator over the geocoding, routing, flight and narrative providers."""

    def __init__(
        self,
        config: ProviderConfig,
        plans: PlanRepository,
        *,
        airport_codes: dict[str, str],
        visa_rules: dict[str, list[str]],
        narrative_client: NarrativeClient | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize aggregator.

        Args:
            config: Provider credentials, limits and planning constants
            plans: Repository the finished plan is stored in
            airport_codes: City -> IATA table for flight search
            visa_rules: Citizenship -> visa-free destinations table
            narrative_client: Narrative generator, None when not configured
            http_client: Shared httpx client for provider calls (optional)
            clock: Returns the current UTC time (for testing)
        """
        self._config = config
        self._plans = plans
        self._airport_codes = airport_codes
        self._visa_rules = visa_rules
        self._narrative = narrative_client
        self._http = http_client
        self._clock = clock or (lambda: datetime.now(UTC))
        self._metrics = PrometheusProviderMetrics()

    async def generate(self, request: PlanRequest, ctx: RequestContext) -> TravelPlan:
        """Build, persist and return a travel plan.

        Args:
            request: Validated plan request
            ctx: Request context; the plan is owned by ctx.user_id

        Returns:
            The stored TravelPlan

        Raises:
            PlanPersistenceError: If the plan could not be stored
        """
        plan = await self.build_plan(request, ctx)

        try:
            await self._plans.save_plan(plan, ctx)
        except PlanPersistenceError:
            raise
        except Exception as e:
            raise PlanPersistenceError(f"could not store plan {plan.plan_id}") from e

        logger.info(f"[aggregator] plan_id={plan.plan_id} stored for user_id={ctx.user_id}")
        return plan

    async def regenerate(
        self,
        previous: TravelPlan,
        ctx: RequestContext,
        transport_mode: TransportMode | None = None,
    ) -> TravelPlan:
        """Create a brand-new plan from an earlier plan's request.

        The earlier plan is left untouched.
        """
        request = previous.request
        if transport_mode is not None:
            request = request.model_copy(update={"transport_mode": transport_mode})
        return await self.generate(request, ctx)

    async def build_plan(self, request: PlanRequest, ctx: RequestContext) -> TravelPlan:
        """Assemble a TravelPlan without storing it. Never raises."""
        plan_id = uuid.uuid4()
        mode = request.transport_mode
        baseline = Decimal(self._config.misc_cost_baseline)
        status = StatusMessage()

        route: RouteResult | None = None
        flight: FlightResult | None = None
        visa: VisaResult | None = None
        narrative: str | None = None
        fell_back = False

        logger.info(
            f"[aggregator] plan_id={plan_id} {request.departure_location!r} -> "
            f"{request.destination_location!r} by {mode.value}"
        )

        try:
            route_outcome, flight_outcome = await asyncio.gather(
                self._plan_route(request),
                self._plan_flight(request),
                return_exceptions=True,
            )
            if isinstance(route_outcome, _Outcome):
                route = route_outcome.result  # type: ignore[assignment]
                status.add(route_outcome.fragment)
            if isinstance(flight_outcome, _Outcome):
                flight = flight_outcome.result  # type: ignore[assignment]
                status.add(flight_outcome.fragment)
            for outcome in (route_outcome, flight_outcome):
                if isinstance(outcome, BaseException):
                    raise outcome

            visa = self._lookup_visa(request)
            narrative = await self._generate_narrative(request, status)
        except Exception as e:
            logger.error(f"[aggregator] plan_id={plan_id} fell back: {e}", exc_info=True)
            fell_back = True
            if self._config.narrative_failure_mode == "abort":
                # All-or-nothing: discard everything computed so far
                route = flight = visa = None
            route = route or _route_error(mode, "Route data unavailable due to an unexpected error.")
            flight = flight or _flight_error("Flight data unavailable due to an unexpected error.")
            visa = visa or _visa_error("Visa information unavailable due to an unexpected error.")
            narrative = APOLOGY_NARRATIVE
            status.prepend(OVERALL_FAILURE_NOTICE)

        assert route is not None and flight is not None and visa is not None

        if fell_back:
            total, is_estimate = baseline, True
        else:
            total, is_estimate = estimate_total_cost(flight, baseline)
        if is_estimate:
            status.add(COST_ESTIMATE_NOTE)
        if visa.source == Provenance.mock:
            status.add(VISA_MOCK_NOTE)
        elif visa.source == Provenance.error:
            status.add(visa.error)

        if fell_back:
            self._metrics.record_plan("fallback")
        elif route.source == Provenance.live and flight.source == Provenance.live:
            self._metrics.record_plan("complete")
        else:
            self._metrics.record_plan("degraded")

        return TravelPlan(
            plan_id=plan_id,
            owner=ctx.user_id,
            request=request,
            narrative=narrative or FALLBACK_NARRATIVE,
            route=route,
            flight=flight,
            visa=visa,
            total_estimated_cost=total,
            status_message=status.render(),
            created_at=self._clock(),
        )

    async def _plan_route(self, request: PlanRequest) -> _Outcome:
        """Geocode both ends concurrently, then route between them."""
        mode = request.transport_mode
        origin, destination = await asyncio.gather(
            self._geocode(request.departure_location),
            self._geocode(request.destination_location),
        )

        if not origin.success or not destination.success:
            problems = []
            if not origin.success:
                problems.append(
                    f'Could not locate departure "{request.departure_location}": {origin.error}'
                )
            if not destination.success:
                problems.append(
                    f'Could not locate destination "{request.destination_location}": '
                    f"{destination.error}"
                )
            detail = " ".join(p.rstrip(".") + "." for p in problems)
            return _Outcome(_route_error(mode, detail), f"Route unavailable. {detail}")

        assert origin.data is not None and destination.data is not None
        routed = await self._route(origin.data, destination.data, mode)
        if not routed.success or routed.data is None:
            detail = routed.error or "Routing failed."
            return _Outcome(_route_error(mode, detail), f"Route unavailable. {detail}")

        return _Outcome(routed.data)

    async def _geocode(self, query: str) -> ProviderResult[Coordinates]:
        return await guarded_call(
            "here.geocode",
            here.geocode(
                query,
                api_key=self._config.here_api_key,
                base_url=self._config.here_geocode_url,
                client=self._http,
            ),
            self._config.timeout_seconds,
        )

    async def _route(
        self, origin: Coordinates, destination: Coordinates, mode: TransportMode
    ) -> ProviderResult[RouteResult]:
        return await guarded_call(
            "here.route",
            here.route(
                origin,
                destination,
                mode,
                api_key=self._config.here_api_key,
                base_url=self._config.here_router_url,
                client=self._http,
            ),
            self._config.timeout_seconds,
        )

    def departure_date(self) -> date:
        """Outbound date used for flight search."""
        return (self._clock() + timedelta(days=self._config.flight_search_offset_days)).date()

    async def _plan_flight(self, request: PlanRequest) -> _Outcome:
        searched = await guarded_call(
            "amadeus.flights",
            amadeus.search_flights(
                request.departure_location,
                request.destination_location,
                self.departure_date(),
                client_id=self._config.amadeus_client_id,
                client_secret=self._config.amadeus_client_secret,
                airport_codes=self._airport_codes,
                base_url=self._config.amadeus_base_url,
                client=self._http,
            ),
            self._config.timeout_seconds,
        )

        if not searched.success or searched.data is None:
            detail = searched.error or "Flight search failed."
            return _Outcome(_flight_error(detail), f"Flight search unavailable. {detail}")

        # Zero offers is a live result carrying a note
        return _Outcome(searched.data, searched.error)

    def _lookup_visa(self, request: PlanRequest) -> VisaResult:
        try:
            result = lookup_visa_requirements(
                request.citizenship, request.destination_location, self._visa_rules
            )
        except Exception as e:
            logger.error(f"[aggregator] visa lookup failed: {e}", exc_info=True)
            return _visa_error(f"Visa lookup failed: {type(e).__name__}.")

        assert result.data is not None
        return result.data

    async def _generate_narrative(self, request: PlanRequest, status: StatusMessage) -> str:
        """Generate the narrative, applying the configured failure policy.

        Raises:
            NarrativeGenerationError: In "abort" mode, so the caller's
                catch-all replaces the whole plan with fallbacks
        """
        if self._narrative is None:
            error = NarrativeGenerationError("narrative generator not configured")
            if self._config.narrative_failure_mode == "abort":
                raise error
            status.add("AI travel advice is unavailable: narrative generator not configured.")
            return FALLBACK_NARRATIVE

        try:
            return await asyncio.wait_for(
                self._narrative.generate(request),
                timeout=self._config.narrative_timeout_seconds,
            )
        except (NarrativeGenerationError, TimeoutError) as e:
            if self._config.narrative_failure_mode == "abort":
                raise NarrativeGenerationError(str(e) or "narrative generation timed out") from e
            logger.warning(f"[aggregator] narrative unavailable: {e}")
            status.add("AI travel advice is unavailable right now; showing general guidance.")
            return FALLBACK_NARRATIVE


__all__ = ["FALLBACK_NARRATIVE", "APOLOGY_NARRATIVE", "PlanAggregator"]
