# backend/tour_planner/models/itinerary_models.py

import re
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


SLOT_NAMES = ("morning", "afternoon", "evening")

_DAY_KEY = re.compile(r"^day(\d+)$", re.IGNORECASE)


# ----------------------------------------------------------
# PLANNED SLOT (one of morning / afternoon / evening)
# ----------------------------------------------------------
class PlannedSlot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time_slot: str = Field("", alias="timeSlot")
    experience_id: int = Field(0, alias="experienceId")
    vendor_id: str = Field("", alias="vendorId")
    tour_id: int = Field(0, alias="tourId")
    variant_id: int = Field(0, alias="variantId")
    tour_group_name: str = Field("", alias="tourGroupName")
    variant_name: str = Field("", alias="variantName")
    duration: str = ""
    location: str = ""
    notes: str = ""

    @field_validator("experience_id", "tour_id", "variant_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> int:
        # model output sometimes carries ids as strings or null
        if value in (None, ""):
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @field_validator("vendor_id", mode="before")
    @classmethod
    def _coerce_vendor(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("time_slot", "tour_group_name", "variant_name", "duration", "location", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def is_free_time(self) -> bool:
        return self.experience_id <= 0

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class DaySlots(BaseModel):
    number: int = Field(1, ge=1)   # N of "dayN"
    morning: Optional[PlannedSlot] = None
    afternoon: Optional[PlannedSlot] = None
    evening: Optional[PlannedSlot] = None

    def slots(self) -> Iterator[Tuple[str, PlannedSlot]]:
        """Yield (period, slot) for the slots that are present."""
        for name in SLOT_NAMES:
            slot = getattr(self, name)
            if slot is not None:
                yield name, slot

    def booked_slots(self) -> Iterator[Tuple[str, PlannedSlot]]:
        for name, slot in self.slots():
            if not slot.is_free_time:
                yield name, slot


class OptimizationNotes(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    crowd_avoidance: Optional[str] = Field(None, alias="crowdAvoidance")
    logistics: Optional[str] = None
    value_optimization: Optional[str] = Field(None, alias="valueOptimization")
    experience_variety: Optional[str] = Field(None, alias="experienceVariety")


# ----------------------------------------------------------
# ITINERARY DOCUMENT
# ----------------------------------------------------------
class ItineraryDocument(BaseModel):
    """
    Days in ascending day number plus advisory optimization notes. A day keeps
    the number it was generated with, so a missing "day2" leaves a gap rather
    than shifting "day3" onto the second date.

    The vendor shape keys days as "day1", "day2", ... inside an "itinerary"
    object; that shape only exists at the payload boundary.
    """

    days: List[DaySlots] = Field(default_factory=list)
    optimization_notes: OptimizationNotes = Field(default_factory=OptimizationNotes)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ItineraryDocument":
        if not isinstance(payload, dict):
            raise ValueError("Itinerary payload must be a JSON object")

        body = payload.get("itinerary", payload)
        if not isinstance(body, dict):
            raise ValueError("'itinerary' must be a JSON object")

        numbered: Dict[int, Dict[str, Any]] = {}
        for key, value in body.items():
            match = _DAY_KEY.match(str(key))
            if not match or not isinstance(value, dict):
                continue
            number = int(match.group(1))
            # "day0" is not a trip day; "Day1" after "day1" is a duplicate
            if number >= 1 and number not in numbered:
                numbered[number] = value

        days = []
        for number in sorted(numbered):
            raw_day = numbered[number]
            day = {name: raw_day.get(name) for name in SLOT_NAMES if isinstance(raw_day.get(name), dict)}
            days.append(DaySlots.model_validate({**day, "number": number}))

        notes = body.get("optimizationNotes") or {}
        if not isinstance(notes, dict):
            notes = {}

        return cls(days=days, optimization_notes=OptimizationNotes.model_validate(notes))

    def to_payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for day in self.days:
            body[f"day{day.number}"] = {name: slot.to_payload() for name, slot in day.slots()}
        body["optimizationNotes"] = self.optimization_notes.model_dump(by_alias=True, exclude_none=True)
        return {"itinerary": body}

    def day(self, day_index: int) -> Optional[DaySlots]:
        """Lookup by day number (1-based); None for a day the model left out."""
        for day in self.days:
            if day.number == day_index:
                return day
        return None

    def experience_ids(self) -> List[int]:
        seen: List[int] = []
        for day in self.days:
            for _, slot in day.booked_slots():
                if slot.experience_id not in seen:
                    seen.append(slot.experience_id)
        return seen


# ----------------------------------------------------------
# RESULT OF ONE GENERATION RUN
# ----------------------------------------------------------
class GenerationResult(BaseModel):
    success: bool
    itinerary: Optional[ItineraryDocument] = None
    raw_text: str = ""
    error: Optional[str] = None
    used_fallback: bool = False

    def to_response(self) -> Dict[str, Union[bool, str, Dict[str, Any], None]]:
        return {
            "success": self.success,
            "itinerary": self.itinerary.to_payload() if self.itinerary else None,
            "rawResponse": self.raw_text,
            "error": self.error,
            "usedFallback": self.used_fallback,
        }
