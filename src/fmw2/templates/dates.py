from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo

from fmw2.config import settings

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Indexed by date.weekday() (Monday == 0).
DAY_NAMES = [
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
]

_MONTH_LOOKUP = {name.lower(): idx for idx, name in enumerate(MONTHS)}


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.app.timezone)


def local_today() -> date:
    return datetime.now(local_zone()).date()


def start_of_day(value: date | datetime) -> date:
    """Drops the time-of-day; aware datetimes are read in the local zone."""
    if isinstance(value, datetime):
        if value.tzinfo:
            value = value.astimezone(local_zone())
        return value.date()
    return value


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def parse_date(value: Any) -> Optional[date]:
    """
    Parses a submitted date value.
    Accepts ISO dates ("2025-06-03") and picker timestamps ("2025-06-02T16:00:00.000Z").
    Returns None for blank or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return start_of_day(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return start_of_day(parsed)


def day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


def default_span_days(today: date) -> int:
    # Mon-Thu: today + tomorrow, Fri: through Monday (4), Sat: through Monday (3), Sun: Sun + Mon
    weekday = today.weekday()
    if weekday == 4:
        return 4
    if weekday == 5:
        return 3
    return 2


def format_long(day: date) -> str:
    """'3 June'"""
    return f"{day.day} {MONTHS[day.month - 1]}"


def format_long_range(start: date, end: date) -> str:
    if start == end:
        return format_long(start)
    return f"{format_long(start)} to {format_long(end)}"


def format_compact(day: date) -> str:
    """'030625'"""
    return day.strftime("%d%m%y")


def format_dd_mm_yy(day: date) -> str:
    return day.strftime("%d/%m/%y")


def format_dd_mm_yyyy(day: date) -> str:
    return day.strftime("%d/%m/%Y")


def month_name_to_index(name: str) -> Optional[int]:
    return _MONTH_LOOKUP.get(str(name or "").strip().lower())


def calendar_date(year: int, month_index: int, day: int) -> date:
    """
    Builds a date the way a lenient calendar does: days past the end of the
    month roll into the next one and day 0 is the last day of the previous month.
    """
    return date(year, month_index + 1, 1) + timedelta(days=day - 1)
