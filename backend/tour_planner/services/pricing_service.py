# backend/tour_planner/services/pricing_service.py

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping, Optional

from tour_planner.core.config_loader import settings
from tour_planner.core.logger import logger
from tour_planner.models.experience_models import AvailabilityWindow, ExperienceCatalogEntry
from tour_planner.models.itinerary_models import ItineraryDocument, PlannedSlot
from tour_planner.models.planning_models import TravelerCounts, TripCostSummary
from tour_planner.utils.time_utils import booking_date, normalize_time


PRICE_UNAVAILABLE = "Price unavailable"

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "CNY": "¥",
    "AED": "AED ",
    "SGD": "S$",
    "AUD": "A$",
    "CAD": "C$",
    "HKD": "HK$",
    "CHF": "CHF ",
    "THB": "฿",
    "KRW": "₩",
    "VND": "₫",
}


def currency_symbol(code: Optional[str]) -> str:
    code = (code or "USD").upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def _symbol_for(entry: ExperienceCatalogEntry) -> str:
    return entry.currency_symbol or currency_symbol(entry.currency)


def whole_units(amount: float) -> int:
    # half up, never banker's rounding
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_price(amount: float, symbol: str) -> str:
    return f"{symbol}{whole_units(amount)}"


# -------------------------------------------------------
# SLOT → AVAILABILITY WINDOW
# -------------------------------------------------------
def find_availability(
    slot: PlannedSlot,
    day_index: int,
    entry: ExperienceCatalogEntry,
    start_date,
) -> Optional[AvailabilityWindow]:
    variant = entry.get_variant()
    if variant is None or not variant.tours:
        return None

    tour_id = variant.tours[0].id
    date_key = booking_date(start_date, day_index)

    windows = (entry.inventory or {}).get(tour_id, {}).get(date_key) or []
    if not windows:
        logger.debug(f"No availability for tour {tour_id} on {date_key}")
        return None

    wanted = normalize_time(slot.time_slot)
    for window in windows:
        if normalize_time(window.start_time) == wanted:
            return window

    # no exact start time: take the earliest offered window of the day
    return windows[0]


def resolve_unit_price(
    slot: PlannedSlot,
    day_index: int,
    entry: ExperienceCatalogEntry,
    start_date,
) -> Optional[float]:
    window = find_availability(slot, day_index, entry, start_date)
    if window is None or not window.price_profile.persons:
        return None

    person = window.price_profile.persons[0]
    price = person.listing_price if person.listing_price is not None else person.retail_price
    return float(price) if price is not None else None


def price_for(
    slot: PlannedSlot,
    day_index: int,
    entry: Optional[ExperienceCatalogEntry],
    start_date,
) -> str:
    if entry is None or slot.is_free_time:
        return PRICE_UNAVAILABLE

    price = resolve_unit_price(slot, day_index, entry, start_date)
    if price is None:
        return PRICE_UNAVAILABLE
    return format_price(price, _symbol_for(entry))


# -------------------------------------------------------
# TRIP TOTAL
# -------------------------------------------------------
def compute_trip_cost(
    itinerary: ItineraryDocument,
    catalog: Mapping[int, ExperienceCatalogEntry],
    travelers: TravelerCounts,
    start_date,
    discount_rate: Optional[float] = None,
) -> TripCostSummary:
    """
    Sum the displayed (whole-unit) price × travelers over every booked slot,
    then apply the flat trip discount. Slots without a resolvable price
    contribute nothing. Each slot is priced against its own day number.
    """
    rate = settings.trip_discount_rate if discount_rate is None else discount_rate
    traveler_count = travelers.total

    total = 0.0
    priced = unpriced = 0
    currency: Optional[str] = None
    symbol: Optional[str] = None

    for day in itinerary.days:
        for _, slot in day.booked_slots():
            entry = catalog.get(slot.experience_id)
            price = resolve_unit_price(slot, day.number, entry, start_date) if entry else None
            if price is None:
                unpriced += 1
                continue

            priced += 1
            total += whole_units(price) * traveler_count
            if currency is None:
                currency = entry.currency
                symbol = _symbol_for(entry)

    discount = total * rate
    discounted = total - discount
    per_person = discounted / traveler_count if traveler_count else 0.0

    return TripCostSummary(
        original_total=round(total, 2),
        discount_amount=round(discount, 2),
        discounted_total=round(discounted, 2),
        per_person=round(per_person, 2),
        currency=currency or "USD",
        currency_symbol=symbol or currency_symbol(currency),
        traveler_count=traveler_count,
        priced_slots=priced,
        unpriced_slots=unpriced,
    )
