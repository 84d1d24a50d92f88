# backend/tests/test_planner_orchestrator.py

import asyncio
import json
from datetime import date

import pytest

from helpers import ScriptedClient, availability, catalog_payload, completion, text
from tour_planner.agents.itinerary_agent import ItineraryAgent
from tour_planner.agents.planner_orchestrator import PlannerOrchestrator, PlanningSession
from tour_planner.core.exceptions import NoExperiencesResolved
from tour_planner.core.retry import RetryPolicy
from tour_planner.models.itinerary_models import GenerationResult, ItineraryDocument
from tour_planner.models.planning_models import TripRequest
from tour_planner.services.experience_service import build_inventory_index, transform_experience


class FakeAgent:
    def __init__(self, result: GenerationResult):
        self.result = result
        self.calls = []
        self.cancel_tokens = []

    async def generate_itinerary(self, attractions, duration, travelers, start_date, end_date,
                                 bypass_timeout=False, cancel_token=None):
        self.cancel_tokens.append(cancel_token)
        self.calls.append((list(attractions), duration, travelers.total, start_date, end_date, bypass_timeout))
        return self.result


class FakeExperienceService:
    def __init__(self, entries):
        self.entries = entries
        self.calls = []

    async def fetch_catalog(self, experience_ids, from_date=None):
        self.calls.append((list(experience_ids), from_date))
        wanted = set(experience_ids)
        return [e for e in self.entries if e.id in wanted]


def _entry(experience_id, variant_id, tour_id, windows, name):
    entry = transform_experience(catalog_payload(experience_id, variant_id, tour_id, name))
    return entry.model_copy(update={"inventory": build_inventory_index(windows)})


@pytest.fixture
def trip():
    return TripRequest(
        attractions=["Louvre Museum", "Seine River"],
        start_date=date(2025, 6, 3),
        end_date=date(2025, 6, 5),
        travelers={"adults": 2},
    )


@pytest.fixture
def generation(itinerary_payload):
    return GenerationResult(success=True, itinerary=ItineraryDocument.from_payload(itinerary_payload), raw_text="{}")


@pytest.fixture
def entries():
    return [
        _entry(101, 501, 1001, [availability(1001, "2025-06-03", "09:00", listing=50)], "Louvre"),
        _entry(202, 602, 2002, [availability(2002, "2025-06-04", "18:00", listing=30)], "Seine Cruise"),
    ]


def test_plan_resolves_catalog_from_trip_start(trip, generation, entries):
    agent = FakeAgent(generation)
    service = FakeExperienceService(entries)
    planner = PlannerOrchestrator(itinerary_agent=agent, experience_service=service)

    session = asyncio.run(planner.plan(trip, bypass_timeout=True))

    assert agent.calls == [(["Louvre Museum", "Seine River"], 2, 2, date(2025, 6, 3), date(2025, 6, 5), True)]
    assert service.calls == [([101, 202], date(2025, 6, 3))]
    assert sorted(session.catalog) == [101, 202]
    assert session.unresolved_experience_ids() == []
    assert session.cost_summary().discounted_total == 144


def test_day_plans_mark_free_time_and_prices(trip, generation, entries):
    planner = PlannerOrchestrator(itinerary_agent=FakeAgent(generation), experience_service=FakeExperienceService(entries))
    session = asyncio.run(planner.plan(trip))

    day1, day2 = session.day_plans()
    assert (day1.display_date, day1.day_name) == ("Jun 3", "Tuesday")
    assert [e.period for e in day1.experiences] == ["morning", "afternoon"]
    assert day1.experiences[0].name == "Louvre"
    assert day1.experiences[0].price == "€50"
    assert day1.experiences[1].is_free_time
    assert day1.experiences[1].price is None
    assert day2.date == date(2025, 6, 4)
    assert day2.experiences[0].price == "€30"


def test_partially_resolved_catalog(trip, generation, entries):
    planner = PlannerOrchestrator(
        itinerary_agent=FakeAgent(generation),
        experience_service=FakeExperienceService(entries[:1]),
    )
    session = asyncio.run(planner.plan(trip))

    response = session.to_response()
    assert response.unresolved_experience_ids == [202]
    assert response.cost.unpriced_slots == 1
    cruise = response.days[1].experiences[0]
    assert cruise.name == "Seine Cruise"
    assert cruise.price == "Price unavailable"


def test_no_experience_resolved_raises(trip, generation):
    planner = PlannerOrchestrator(itinerary_agent=FakeAgent(generation), experience_service=FakeExperienceService([]))
    with pytest.raises(NoExperiencesResolved):
        asyncio.run(planner.plan(trip))


def test_failed_generation_skips_catalog(trip):
    service = FakeExperienceService([])
    planner = PlannerOrchestrator(
        itinerary_agent=FakeAgent(GenerationResult(success=False, error="Invalid JSON", raw_text="oops")),
        experience_service=service,
    )
    session = asyncio.run(planner.plan(trip))

    assert service.calls == []
    assert session.day_plans() == []
    assert session.cost_summary().traveler_count == 2
    assert session.to_response().itinerary == {}


def test_replace_catalog_swaps_whole_mapping(trip, entries):
    session = PlanningSession(trip)
    session.replace_catalog(entries)
    first = session.catalog
    session.replace_catalog(entries[1:])
    assert sorted(first) == [101, 202]
    assert sorted(session.catalog) == [202]


def test_each_session_gets_its_own_cancel_token(trip, generation, entries):
    agent = FakeAgent(generation)
    planner = PlannerOrchestrator(itinerary_agent=agent, experience_service=FakeExperienceService(entries))

    first = asyncio.run(planner.plan(trip))
    second = asyncio.run(planner.plan(trip))

    assert agent.cancel_tokens == [first.cancel_token, second.cancel_token]
    assert first.cancel_token is not second.cancel_token


def test_cancelling_one_session_leaves_the_planner_usable(trip, itinerary_payload, entries):
    client = ScriptedClient([completion("end_turn", text(json.dumps(itinerary_payload)))])
    agent = ItineraryAgent(client=client, retry_policy=RetryPolicy.immediate())
    planner = PlannerOrchestrator(itinerary_agent=agent, experience_service=FakeExperienceService(entries))

    cancelled = PlanningSession(trip)
    cancelled.cancel()
    cancelled = asyncio.run(planner.plan(trip, session=cancelled))
    later = asyncio.run(planner.plan(trip))

    assert not cancelled.generation.success
    assert cancelled.generation.error == "Itinerary generation cancelled"
    assert later.generation.success
    assert sorted(later.catalog) == [101, 202]
    assert len(client.calls) == 1


def test_day_plans_keep_day_numbers_across_gaps(trip, itinerary_payload, entries):
    payload = itinerary_payload["itinerary"]
    payload["day3"] = payload.pop("day2")
    cruise = entries[1].model_copy(update={
        "inventory": build_inventory_index([availability(2002, "2025-06-05", "18:00", listing=30)]),
    })
    gapped = GenerationResult(success=True, itinerary=ItineraryDocument.from_payload(itinerary_payload))
    planner = PlannerOrchestrator(
        itinerary_agent=FakeAgent(gapped),
        experience_service=FakeExperienceService([entries[0], cruise]),
    )

    session = asyncio.run(planner.plan(trip))

    days = session.day_plans()
    assert [(d.day, d.date) for d in days] == [(1, date(2025, 6, 3)), (3, date(2025, 6, 5))]
    assert days[1].experiences[0].price == "€30"
    assert session.cost_summary().original_total == 160
