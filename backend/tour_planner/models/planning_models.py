# backend/tour_planner/models/planning_models.py

import math
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# upper bound for each traveler type
MAX_PER_TRAVELER_TYPE = 20


class TravelerCounts(BaseModel):
    adults: int = Field(2, ge=0, le=MAX_PER_TRAVELER_TYPE)
    children: int = Field(0, ge=0, le=MAX_PER_TRAVELER_TYPE)
    infants: int = Field(0, ge=0, le=MAX_PER_TRAVELER_TYPE)
    seniors: int = Field(0, ge=0, le=MAX_PER_TRAVELER_TYPE)

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants + self.seniors

    def describe(self) -> str:
        """Plain-English group description, e.g. "2 adults, 1 child and 1 infant"."""
        parts = []
        if self.adults > 0:
            parts.append(f"{self.adults} adult{'s' if self.adults > 1 else ''}")
        if self.children > 0:
            parts.append(f"{self.children} child{'ren' if self.children > 1 else ''}")
        if self.infants > 0:
            parts.append(f"{self.infants} infant{'s' if self.infants > 1 else ''}")
        if self.seniors > 0:
            parts.append(f"{self.seniors} senior{'s' if self.seniors > 1 else ''}")

        if len(parts) <= 1:
            return "".join(parts)
        return ", ".join(parts[:-1]) + " and " + parts[-1]


class TripRequest(BaseModel):
    attractions: List[str]
    start_date: date
    end_date: date
    travelers: TravelerCounts = Field(default_factory=TravelerCounts)

    @field_validator("attractions")
    @classmethod
    def _require_attractions(cls, value: List[str]) -> List[str]:
        cleaned = [name.strip() for name in value if name and name.strip()]
        if not cleaned:
            raise ValueError("Please select at least one attraction")
        return cleaned

    @model_validator(mode="after")
    def _check_trip(self) -> "TripRequest":
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        if self.travelers.adults < 1:
            raise ValueError("At least one adult is required")
        return self

    @property
    def duration_days(self) -> int:
        return math.ceil(abs((self.end_date - self.start_date).days))


# ----------------------------------------------------------
# COST SUMMARY (derived, never stored)
# ----------------------------------------------------------
class TripCostSummary(BaseModel):
    original_total: float = 0.0
    discount_amount: float = 0.0
    discounted_total: float = 0.0
    per_person: float = 0.0
    currency: str = "USD"
    currency_symbol: str = "$"
    traveler_count: int = 0
    priced_slots: int = 0
    unpriced_slots: int = 0


# ----------------------------------------------------------
# DAY PLAN (what the itinerary page renders)
# ----------------------------------------------------------
class PlannedExperience(BaseModel):
    period: str
    time_slot: str = ""
    experience_id: int = 0
    name: str = ""
    description: str = ""
    image: Optional[str] = None
    duration: str = ""
    location: str = ""
    notes: str = ""
    price: Optional[str] = None
    is_free_time: bool = False


class DayPlan(BaseModel):
    day: int
    date: date
    display_date: str
    day_name: str
    experiences: List[PlannedExperience] = Field(default_factory=list)


class PlanResponse(BaseModel):
    itinerary: Dict[str, Any]
    raw_response: str = ""
    used_fallback: bool = False
    days: List[DayPlan] = Field(default_factory=list)
    cost: TripCostSummary
    unresolved_experience_ids: List[int] = Field(default_factory=list)
