# backend/tour_planner/api/routes_plan.py

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tour_planner.agents.planner_orchestrator import PlannerOrchestrator
from tour_planner.core.exceptions import NoExperiencesResolved
from tour_planner.core.logger import logger
from tour_planner.models.planning_models import PlanResponse, TripRequest

router = APIRouter(prefix="/plan", tags=["planner"])

planner = PlannerOrchestrator()


# --------------------------
# Request model
# --------------------------
class PlanRequest(TripRequest):
    bypass_timeout: bool = False


class GenerationResponse(BaseModel):
    success: bool
    itinerary: Optional[Dict[str, Any]] = None
    rawResponse: str = ""
    error: Optional[str] = None
    usedFallback: bool = False


# --------------------------
# Itinerary only (no catalog / pricing)
# --------------------------
@router.post("/itinerary", response_model=GenerationResponse, summary="Generate an itinerary document")
async def generate_itinerary(req: PlanRequest):
    result = await planner.generate(req, bypass_timeout=req.bypass_timeout)
    return result.to_response()


# --------------------------
# Full plan: itinerary + catalog + prices
# --------------------------
@router.post("", response_model=PlanResponse, summary="Plan and price a trip")
async def plan_trip(req: PlanRequest):
    try:
        session = await planner.plan(req, bypass_timeout=req.bypass_timeout)
    except NoExperiencesResolved as e:
        logger.error(f"Plan failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    if not session.generation or not session.generation.success:
        detail = session.generation.error if session.generation else "Itinerary generation failed"
        raise HTTPException(status_code=502, detail=detail)

    return session.to_response()
