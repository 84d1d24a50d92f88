# backend/tour_planner/agents/planner_orchestrator.py

from datetime import timedelta
from typing import Dict, List, Optional
from uuid import uuid4

from tour_planner.agents.itinerary_agent import ItineraryAgent
from tour_planner.core.exceptions import NoExperiencesResolved
from tour_planner.core.logger import logger
from tour_planner.core.retry import CancellationToken
from tour_planner.models.experience_models import ExperienceCatalogEntry
from tour_planner.models.itinerary_models import GenerationResult, ItineraryDocument
from tour_planner.models.planning_models import (
    DayPlan,
    PlannedExperience,
    PlanResponse,
    TripCostSummary,
    TripRequest,
)
from tour_planner.services.experience_service import ExperienceService
from tour_planner.services.pricing_service import compute_trip_cost, price_for
from tour_planner.utils.time_utils import display_date, weekday_name


class PlanningSession:
    """
    Working set of one planning run: the trip, the generated itinerary and the
    catalog resolved for it. Created per plan() call and dropped afterwards.
    """

    def __init__(self, trip: TripRequest):
        self.id = str(uuid4())
        self.trip = trip
        self.generation: Optional[GenerationResult] = None
        self.catalog: Dict[int, ExperienceCatalogEntry] = {}
        self.cancel_token = CancellationToken()

    def cancel(self) -> None:
        """Stop this run at its next attempt or pacing wait; other sessions are untouched."""
        self.cancel_token.cancel()

    @property
    def itinerary(self) -> Optional[ItineraryDocument]:
        return self.generation.itinerary if self.generation else None

    def replace_catalog(self, entries: List[ExperienceCatalogEntry]) -> None:
        # never patched in place; a refetch swaps the whole mapping
        self.catalog = {entry.id: entry for entry in entries}

    def unresolved_experience_ids(self) -> List[int]:
        if not self.itinerary:
            return []
        return [eid for eid in self.itinerary.experience_ids() if eid not in self.catalog]

    # -----------------------------------------------------------
    # Derived views
    # -----------------------------------------------------------
    def cost_summary(self) -> TripCostSummary:
        if not self.itinerary:
            return TripCostSummary(traveler_count=self.trip.travelers.total)
        return compute_trip_cost(self.itinerary, self.catalog, self.trip.travelers, self.trip.start_date)

    def day_plans(self) -> List[DayPlan]:
        if not self.itinerary:
            return []

        plans = []
        for day in self.itinerary.days:
            day_index = day.number
            current = self.trip.start_date + timedelta(days=day_index - 1)
            experiences = []

            for period, slot in day.slots():
                if slot.is_free_time:
                    experiences.append(PlannedExperience(period=period, is_free_time=True, name="Free time"))
                    continue

                entry = self.catalog.get(slot.experience_id)
                experiences.append(PlannedExperience(
                    period=period,
                    time_slot=slot.time_slot,
                    experience_id=slot.experience_id,
                    name=entry.name if entry else (slot.tour_group_name or slot.variant_name),
                    description=entry.description if entry else slot.notes,
                    image=entry.image if entry else None,
                    duration=slot.duration,
                    location=slot.location,
                    notes=slot.notes,
                    price=price_for(slot, day_index, entry, self.trip.start_date),
                ))

            plans.append(DayPlan(
                day=day_index,
                date=current,
                display_date=display_date(current),
                day_name=weekday_name(current),
                experiences=experiences,
            ))
        return plans

    def to_response(self) -> PlanResponse:
        return PlanResponse(
            itinerary=self.itinerary.to_payload() if self.itinerary else {},
            raw_response=self.generation.raw_text if self.generation else "",
            used_fallback=self.generation.used_fallback if self.generation else False,
            days=self.day_plans(),
            cost=self.cost_summary(),
            unresolved_experience_ids=self.unresolved_experience_ids(),
        )


class PlannerOrchestrator:

    def __init__(
        self,
        itinerary_agent: Optional[ItineraryAgent] = None,
        experience_service: Optional[ExperienceService] = None,
    ):
        self.itinerary_agent = itinerary_agent or ItineraryAgent()
        self.experience_service = experience_service or ExperienceService()

    async def generate(
        self,
        trip: TripRequest,
        bypass_timeout: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> GenerationResult:
        return await self.itinerary_agent.generate_itinerary(
            trip.attractions,
            trip.duration_days,
            trip.travelers,
            trip.start_date,
            trip.end_date,
            bypass_timeout=bypass_timeout,
            cancel_token=cancel_token,
        )

    # -----------------------------------------------------------
    # Core pipeline: itinerary -> catalog -> prices
    # -----------------------------------------------------------
    async def plan(
        self,
        trip: TripRequest,
        bypass_timeout: bool = False,
        session: Optional[PlanningSession] = None,
    ) -> PlanningSession:
        # callers that want to cancel pass their own session and keep a handle on it
        session = session or PlanningSession(trip)
        logger.info(f"[{session.id}] Planning {trip.duration_days} day trip for {trip.travelers.describe()}")

        session.generation = await self.generate(trip, bypass_timeout=bypass_timeout, cancel_token=session.cancel_token)
        if not session.generation.success or not session.itinerary:
            logger.warning(f"[{session.id}] Itinerary generation failed: {session.generation.error}")
            return session

        experience_ids = session.itinerary.experience_ids()
        if not experience_ids:
            logger.info(f"[{session.id}] Itinerary has no bookable experiences")
            return session

        entries = await self.experience_service.fetch_catalog(experience_ids, from_date=trip.start_date)
        if not entries:
            raise NoExperiencesResolved()

        session.replace_catalog(entries)
        logger.info(f"[{session.id}] Resolved {len(entries)}/{len(experience_ids)} experiences")
        return session
