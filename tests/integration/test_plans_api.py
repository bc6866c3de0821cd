"""Integration tests for the /plans endpoints.

Repositories are in-memory and no provider is configured, so every plan
is built from error placeholders and example visa data without network
access.
"""

import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from backend.app.adapters.airports import load_airport_codes
from backend.app.adapters.visa import load_visa_rules
from backend.app.api.auth import DEV_USER_ID
from backend.app.api.routes.plans import (
    get_aggregator,
    get_plan_repository,
    get_trip_leg_repository,
)
from backend.app.config import ProviderConfig
from backend.app.db.context import RequestContext
from backend.app.db.inmemory import InMemoryPlanRepository, InMemoryTripLegRepository
from backend.app.db.repositories import PlanPersistenceError
from backend.app.main import app
from backend.app.models.plan import TravelPlan
from backend.app.orchestration.aggregator import FALLBACK_NARRATIVE, PlanAggregator

PLAN_BODY = {
    "citizenship": "American",
    "residency_status": "Citizen",
    "departure_location": "Toronto, Canada",
    "destination_location": "London, UK",
    "transport_mode": "car",
}


class FailingPlanRepository(InMemoryPlanRepository):
    async def save_plan(self, plan: TravelPlan, ctx: RequestContext) -> None:
        raise PlanPersistenceError("database unavailable")


@pytest.fixture
def plans() -> InMemoryPlanRepository:
    return InMemoryPlanRepository()


@pytest.fixture
def client(plans: InMemoryPlanRepository) -> Generator[TestClient, None, None]:
    """Test client with in-memory repositories and no provider credentials."""
    legs = InMemoryTripLegRepository(plans)

    def aggregator() -> PlanAggregator:
        return PlanAggregator(
            ProviderConfig(),
            plans,
            airport_codes=load_airport_codes(),
            visa_rules=load_visa_rules(),
        )

    app.dependency_overrides[get_plan_repository] = lambda: plans
    app.dependency_overrides[get_trip_leg_repository] = lambda: legs
    app.dependency_overrides[get_aggregator] = aggregator
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth(user_id: uuid.UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_id}"}


class TestCreatePlan:
    """POST /plans."""

    def test_creates_degraded_plan_without_providers(self, client: TestClient) -> None:
        response = client.post("/plans", json=PLAN_BODY)

        assert response.status_code == 201
        data = response.json()
        assert uuid.UUID(data["plan_id"])
        assert data["owner"] == str(DEV_USER_ID)
        assert data["route"]["source"] == "error"
        assert data["flight"]["source"] == "error"
        assert data["visa"]["source"] == "mock"
        assert data["visa"]["required"] is False
        assert data["total_estimated_cost"] == "500"
        assert data["narrative"] == FALLBACK_NARRATIVE
        assert "Route unavailable" in data["status_message"]

    def test_missing_field_is_422(self, client: TestClient) -> None:
        body = {k: v for k, v in PLAN_BODY.items() if k != "citizenship"}

        response = client.post("/plans", json=body)

        assert response.status_code == 422

    def test_blank_location_is_422(self, client: TestClient) -> None:
        response = client.post("/plans", json={**PLAN_BODY, "destination_location": "  "})

        assert response.status_code == 422

    def test_unknown_transport_mode_is_422(self, client: TestClient) -> None:
        response = client.post("/plans", json={**PLAN_BODY, "transport_mode": "boat"})

        assert response.status_code == 422

    def test_storage_failure_is_500(self, client: TestClient) -> None:
        failing = FailingPlanRepository()
        app.dependency_overrides[get_aggregator] = lambda: PlanAggregator(
            ProviderConfig(),
            failing,
            airport_codes=load_airport_codes(),
            visa_rules=load_visa_rules(),
        )

        response = client.post("/plans", json=PLAN_BODY)

        assert response.status_code == 500
        assert response.json() == {"detail": "internal error"}

    def test_invalid_auth_is_401(self, client: TestClient) -> None:
        response = client.post("/plans", json=PLAN_BODY, headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401


class TestReadPlans:
    """GET /plans, /plans/{id}, /brief, /checklist."""

    def test_get_plan_round_trip(self, client: TestClient) -> None:
        created = client.post("/plans", json=PLAN_BODY).json()

        response = client.get(f"/plans/{created['plan_id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_unknown_plan_is_404(self, client: TestClient) -> None:
        response = client.get(f"/plans/{uuid.uuid4()}")

        assert response.status_code == 404

    def test_malformed_plan_id_is_400(self, client: TestClient) -> None:
        response = client.get("/plans/not-a-uuid")

        assert response.status_code == 400

    def test_other_users_plan_is_404(self, client: TestClient) -> None:
        created = client.post("/plans", json=PLAN_BODY, headers=_auth(uuid.uuid4())).json()

        response = client.get(f"/plans/{created['plan_id']}", headers=_auth(uuid.uuid4()))

        assert response.status_code == 404

    def test_list_plans_is_scoped_and_limited(self, client: TestClient) -> None:
        user = uuid.uuid4()
        for _ in range(3):
            client.post("/plans", json=PLAN_BODY, headers=_auth(user))
        client.post("/plans", json=PLAN_BODY, headers=_auth(uuid.uuid4()))

        response = client.get("/plans", params={"limit": 2}, headers=_auth(user))

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert all(p["owner"] == str(user) for p in response.json())

    def test_list_limit_is_capped(self, client: TestClient) -> None:
        response = client.get("/plans", params={"limit": 51})

        assert response.status_code == 422

    def test_brief(self, client: TestClient) -> None:
        created = client.post("/plans", json=PLAN_BODY).json()

        response = client.get(f"/plans/{created['plan_id']}/brief")

        assert response.status_code == 200
        brief = response.json()
        assert brief["total_cost"] == "$500.00"
        assert brief["cost_badge"] == "Cost Error"
        assert brief["route_badge"] == "Route Error"
        assert brief["distance"] == "N/A"
        assert brief["visa_badge"] == "Mock Data"
        assert brief["visa_required"] == "No"
        assert len(brief["border_crossing_tips"]) == 5

    def test_checklist_includes_visa_documents(self, client: TestClient) -> None:
        created = client.post("/plans", json=PLAN_BODY).json()

        response = client.get(f"/plans/{created['plan_id']}/checklist")

        assert response.status_code == 200
        checklist = response.json()
        assert checklist["from_visa"] == created["visa"]["documents"]
        assert checklist["items"][: len(checklist["from_visa"])] == checklist["from_visa"]


class TestRegenerate:
    """POST /plans/{id}/regenerate."""

    def test_regenerate_creates_new_plan(
        self, client: TestClient, plans: InMemoryPlanRepository
    ) -> None:
        created = client.post("/plans", json=PLAN_BODY).json()

        response = client.post(f"/plans/{created['plan_id']}/regenerate")

        assert response.status_code == 201
        regenerated = response.json()
        assert regenerated["plan_id"] != created["plan_id"]
        assert regenerated["request"] == created["request"]
        assert client.get(f"/plans/{created['plan_id']}").json() == created

    def test_regenerate_with_mode_override(self, client: TestClient) -> None:
        created = client.post("/plans", json=PLAN_BODY).json()

        response = client.post(
            f"/plans/{created['plan_id']}/regenerate", json={"transport_mode": "truck"}
        )

        assert response.status_code == 201
        assert response.json()["request"]["transport_mode"] == "truck"
        assert response.json()["route"]["transport_methods"] == ["truck"]

    def test_regenerate_unknown_plan_is_404(self, client: TestClient) -> None:
        response = client.post(f"/plans/{uuid.uuid4()}/regenerate")

        assert response.status_code == 404


class TestTripLegs:
    """POST/GET /plans/{id}/legs."""

    def test_add_and_list_legs(self, client: TestClient) -> None:
        created = client.post("/plans", json=PLAN_BODY).json()
        plan_id = created["plan_id"]

        for number, (dep, arr) in [(2, ("Buffalo", "JFK")), (1, ("Toronto", "Buffalo"))]:
            response = client.post(
                f"/plans/{plan_id}/legs",
                json={
                    "leg_number": number,
                    "departure": dep,
                    "arrival": arr,
                    "transport_method": "car",
                    "estimated_cost": "40.00",
                    "duration": "2h 0m",
                },
            )
            assert response.status_code == 201

        listed = client.get(f"/plans/{plan_id}/legs").json()

        assert [leg["leg_number"] for leg in listed] == [1, 2]
        assert listed[0]["departure"] == "Toronto"
        assert all(leg["plan_id"] == plan_id for leg in listed)

    def test_leg_for_unknown_plan_is_404(self, client: TestClient) -> None:
        response = client.post(
            f"/plans/{uuid.uuid4()}/legs",
            json={
                "leg_number": 1,
                "departure": "A",
                "arrival": "B",
                "transport_method": "car",
                "estimated_cost": "1",
                "duration": "1h",
            },
        )

        assert response.status_code == 404
