# backend/tests/test_routes.py

import pytest
from fastapi.testclient import TestClient

from helpers import availability, catalog_payload
from main import app
from tour_planner.agents.fallback_itinerary import FALLBACK_RAW_TEXT, load_fallback_itinerary
from tour_planner.agents.planner_orchestrator import PlannerOrchestrator
from tour_planner.api import routes_experiences, routes_plan
from tour_planner.models.itinerary_models import GenerationResult, ItineraryDocument
from tour_planner.services.experience_service import build_inventory_index, transform_experience


TRIP = {
    "attractions": ["Louvre Museum", "Seine River"],
    "start_date": "2025-06-03",
    "end_date": "2025-06-05",
    "travelers": {"adults": 2},
}


class StubAgent:
    def __init__(self, result):
        self.result = result

    async def generate_itinerary(self, *args, **kwargs):
        return self.result


class StubExperienceService:
    def __init__(self, entries):
        self.entries = entries

    async def fetch_catalog(self, experience_ids, from_date=None):
        wanted = {int(i) for i in experience_ids}
        return [e for e in self.entries if e.id in wanted]


def _entries():
    louvre = transform_experience(catalog_payload(101, 501, 1001, "Louvre"))
    louvre = louvre.model_copy(update={
        "inventory": build_inventory_index([availability(1001, "2025-06-03", "09:00", listing=50)]),
    })
    cruise = transform_experience(catalog_payload(202, 602, 2002, "Seine Cruise"))
    cruise = cruise.model_copy(update={
        "inventory": build_inventory_index([availability(2002, "2025-06-04", "18:00", listing=30)]),
    })
    return [louvre, cruise]


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def use_planner(monkeypatch):
    def install(result, entries=()):
        planner = PlannerOrchestrator(
            itinerary_agent=StubAgent(result),
            experience_service=StubExperienceService(list(entries)),
        )
        monkeypatch.setattr(routes_plan, "planner", planner)
        return planner
    return install


@pytest.fixture
def generated(itinerary_payload):
    return GenerationResult(success=True, itinerary=ItineraryDocument.from_payload(itinerary_payload), raw_text="{...}")


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# -----------------------------
# /plan
# -----------------------------
def test_plan_returns_days_and_cost(client, use_planner, generated):
    use_planner(generated, _entries())

    resp = client.post("/plan", json=TRIP)

    assert resp.status_code == 200
    body = resp.json()
    assert body["cost"]["original_total"] == 160
    assert body["cost"]["discounted_total"] == 144
    assert body["cost"]["per_person"] == 72
    assert [d["display_date"] for d in body["days"]] == ["Jun 3", "Jun 4"]
    assert body["days"][0]["experiences"][0]["price"] == "€50"
    assert "day1" in body["itinerary"]["itinerary"]


def test_plan_rejects_invalid_trip(client, use_planner, generated):
    use_planner(generated)
    resp = client.post("/plan", json={**TRIP, "end_date": "2025-06-01"})
    assert resp.status_code == 422
    assert "End date must be after start date" in resp.text


def test_plan_with_no_resolved_experiences(client, use_planner, generated):
    use_planner(generated, [])
    resp = client.post("/plan", json=TRIP)
    assert resp.status_code == 502
    assert resp.json()["detail"].startswith("Failed to fetch any experiences")


def test_plan_with_malformed_generation(client, use_planner):
    use_planner(GenerationResult(success=False, error="Invalid JSON in response", raw_text="oops"))
    resp = client.post("/plan", json=TRIP)
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Invalid JSON in response"


def test_itinerary_endpoint_reports_fallback(client, use_planner):
    use_planner(GenerationResult(
        success=True, itinerary=load_fallback_itinerary(), raw_text=FALLBACK_RAW_TEXT, used_fallback=True,
    ))
    resp = client.post("/plan/itinerary", json=TRIP)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["usedFallback"] is True
    assert body["rawResponse"] == FALLBACK_RAW_TEXT
    assert body["itinerary"]["itinerary"]["day1"]["morning"]["experienceId"] == 3909


def test_itinerary_endpoint_reports_malformed_output(client, use_planner):
    use_planner(GenerationResult(success=False, error="No JSON content found in response", raw_text="no json here"))
    resp = client.post("/plan/itinerary", json=TRIP)
    assert resp.status_code == 200
    assert resp.json()["success"] is False
    assert resp.json()["itinerary"] is None


# -----------------------------
# /attractions + /experiences
# -----------------------------
def test_attraction_search(client):
    resp = client.get("/attractions", params={"q": "museum"})
    names = [a["name"] for a in resp.json()]
    assert "Louvre Museum" in names
    assert "Eiffel Tower" not in names
    assert len(client.get("/attractions").json()) == 12


def test_experiences_endpoint(client, monkeypatch):
    monkeypatch.setattr(routes_experiences, "experience_service", StubExperienceService(_entries()))
    resp = client.post("/experiences", json={"experience_ids": [202, 999], "from_date": "2025-06-03"})
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()] == [202]


def test_experiences_endpoint_when_nothing_resolves(client, monkeypatch):
    monkeypatch.setattr(routes_experiences, "experience_service", StubExperienceService([]))
    resp = client.post("/experiences", json={"experience_ids": [1]})
    assert resp.status_code == 502


def test_experiences_endpoint_requires_ids(client):
    assert client.post("/experiences", json={"experience_ids": []}).status_code == 422


def test_slot_price_endpoint(client, itinerary_payload):
    louvre = _entries()[0]
    slot = itinerary_payload["itinerary"]["day1"]["morning"]
    body = {
        "slot": slot,
        "day_index": 1,
        "start_date": "2025-06-03",
        "experience": louvre.model_dump(mode="json"),
    }
    resp = client.post("/experiences/price", json=body)
    assert resp.json() == {"price": "€50", "available": True}

    resp = client.post("/experiences/price", json={**body, "day_index": 3})
    assert resp.json() == {"price": "Price unavailable", "available": False}
