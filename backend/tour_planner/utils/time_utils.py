# backend/tour_planner/utils/time_utils.py

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from tour_planner.core.config_loader import settings


# ---------------------------------------------------------------------------
# TIME OF DAY
# ---------------------------------------------------------------------------
_PARENTHETICAL = re.compile(r"\([^)]*\)")

# " - ", "-", "to", "till", en dash, em dash
_RANGE_SEPARATORS = re.compile(r"\s+-\s+|-|\bto\b|\btill\b|–|—", re.IGNORECASE)

_TIME_RUN = re.compile(
    r"(?P<hour>\d{1,2})(?::(?P<minute>\d{1,2}))?(?::\d{1,2})?\s*(?P<meridiem>[ap]\.?\s?m\.?)?",
    re.IGNORECASE,
)


def _fold_meridiem(hour: int, meridiem: Optional[str]) -> Optional[int]:
    if not meridiem:
        return hour if 0 <= hour <= 23 else None

    if not 1 <= hour <= 12:
        return None

    is_pm = meridiem.lower().startswith("p")
    if hour == 12:
        return 12 if is_pm else 0
    return hour + 12 if is_pm else hour


def normalize_time(value: str) -> str:
    """
    Convert a free-form time (or time range) to 24-hour "HH:MM".

    Accepts forms like "09:00", "9:00AM", "9PM", "09:00 - 11:00",
    "9am to 11am", "(09:00-11:00)" and "10:00:00". The start of a range wins.
    Anything unrecognised is returned unchanged.
    """
    if not isinstance(value, str) or not value.strip():
        return value

    text = _PARENTHETICAL.sub(" ", value).strip()
    if not re.search(r"\d", text):
        # the whole value was an annotation, e.g. "(09:00-11:00)"
        text = value.replace("(", " ").replace(")", " ").strip()

    start = _RANGE_SEPARATORS.split(text, maxsplit=1)[0].strip()

    match = _TIME_RUN.search(start)
    if not match:
        return value

    hour = int(match.group("hour"))
    minute_text = match.group("minute")
    meridiem = match.group("meridiem")

    # bare numbers without AM/PM are not times ("2024", "3 hours")
    if minute_text is None and not meridiem:
        return value

    minute = int(minute_text) if minute_text is not None else 0
    if not 0 <= minute <= 59:
        return value

    hour24 = _fold_meridiem(hour, meridiem)
    if hour24 is None:
        return value

    return f"{hour24:02d}:{minute:02d}"


def times_match(first: str, second: str) -> bool:
    return normalize_time(first) == normalize_time(second)


# ---------------------------------------------------------------------------
# CALENDAR
# ---------------------------------------------------------------------------
def today(tz_name: Optional[str] = None) -> date:
    tz = pytz.timezone(tz_name or settings.timezone)
    return datetime.now(tz).date()


def parse_iso_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()


def booking_date(start_date, day_index: int) -> str:
    """Calendar date (YYYY-MM-DD) of the 1-based day_index of a trip."""
    return (parse_iso_date(start_date) + timedelta(days=day_index - 1)).isoformat()


def trip_duration_days(start_date, end_date) -> int:
    start = parse_iso_date(start_date)
    end = parse_iso_date(end_date)
    return math.ceil(abs((end - start).days))


def display_date(value: date) -> str:
    # "Jun 3"
    return f"{value.strftime('%b')} {value.day}"


def weekday_name(value: date) -> str:
    return value.strftime("%A")
