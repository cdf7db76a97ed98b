"""Calendar-day helpers shared by the schedule and daily record features."""

from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]

WEEKDAYS_ES = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]

MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def to_calendar_day(value: DateLike) -> date:
    """
    Reduce a date, datetime or YYYY-MM-DD string to its local calendar day.

    Aware datetimes are converted to local time first, so the day is the one
    the caregiver sees on the wall calendar.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    return parse_record_date(value)


def format_record_date(value: DateLike) -> str:
    """Format a calendar day as the YYYY-MM-DD key of its daily record."""
    day = to_calendar_day(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_record_date(value: str) -> date:
    """Parse a YYYY-MM-DD record key. Raises ValueError on malformed input."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def shift_date(value: DateLike, days: int) -> date:
    return to_calendar_day(value) + timedelta(days=days)


def describe_date(value: DateLike) -> str:
    """Long Spanish label, e.g. 'martes, 5 de marzo de 2024'."""
    day = to_calendar_day(value)
    return f"{WEEKDAYS_ES[day.weekday()]}, {day.day} de {MONTHS_ES[day.month - 1]} de {day.year}"
