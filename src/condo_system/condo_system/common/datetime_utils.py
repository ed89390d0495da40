from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (seconds tolerated) into time."""
    v = value.strip()
    fmt = "%H:%M:%S" if v.count(":") == 2 else "%H:%M"
    return datetime.strptime(v, fmt).time()


def to_date(value, field_name: str, *, required: bool = True) -> Optional[date]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def to_time(value, field_name: str, *, required: bool = True) -> Optional[time]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    if isinstance(value, time):
        return value
    try:
        return parse_hhmm(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a time (HH:MM)")


def to_datetime(value, field_name: str, *, required: bool = True) -> Optional[datetime]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO datetime")


def minutes_between(start: time, end: time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def first_day_of_month(value: date) -> date:
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    return date(value.year + month_index // 12, month_index % 12 + 1, 1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
