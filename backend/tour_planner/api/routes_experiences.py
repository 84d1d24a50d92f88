# backend/tour_planner/api/routes_experiences.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tour_planner.models.experience_models import ExperienceCatalogEntry
from tour_planner.models.itinerary_models import PlannedSlot
from tour_planner.services.attraction_service import Attraction, search_attractions
from tour_planner.services.experience_service import ExperienceService
from tour_planner.services.pricing_service import PRICE_UNAVAILABLE, price_for

router = APIRouter(tags=["experiences"])

experience_service = ExperienceService()


class CatalogRequest(BaseModel):
    experience_ids: List[int] = Field(..., min_length=1)
    from_date: Optional[date] = None


class PriceRequest(BaseModel):
    slot: PlannedSlot
    day_index: int = Field(..., ge=1)
    start_date: date
    experience: ExperienceCatalogEntry


# -----------------------------
# Attractions offered in the planner form
# -----------------------------
@router.get("/attractions", response_model=List[Attraction])
def list_attractions(q: str = ""):
    return search_attractions(q)


# -----------------------------
# Catalog + inventory for a set of experience ids
# -----------------------------
@router.post("/experiences", response_model=List[ExperienceCatalogEntry])
async def fetch_experiences(req: CatalogRequest):
    entries = await experience_service.fetch_catalog(req.experience_ids, from_date=req.from_date)
    if not entries:
        raise HTTPException(
            status_code=502,
            detail="Failed to fetch any experiences. Please check the experience IDs and try again.",
        )
    return entries


# -----------------------------
# Price of a single planned slot
# -----------------------------
@router.post("/experiences/price")
def slot_price(req: PriceRequest):
    price = price_for(req.slot, req.day_index, req.experience, req.start_date)
    return {"price": price, "available": price != PRICE_UNAVAILABLE}
