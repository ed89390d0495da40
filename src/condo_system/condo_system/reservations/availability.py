"""Slot arithmetic for common-space reservations.

All intervals are half-open ``[start, end)`` on a single day, so a booking
ending at 14:00 and another starting at 14:00 do not clash.
"""
from __future__ import annotations

from datetime import time
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import minutes_between
from ..common.validators import to_money
from ..core.constants import FULL_DAY_MINUTES
from ..core.enums import BLOCKING_RESERVATION_STATUSES
from .model import Reservation, ReservationConfig


def overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    return a_start < b_end and a_end > b_start


def find_conflicts(
    existing: Iterable[Reservation],
    *,
    start: time,
    end: time,
    exclude_id: Optional[int] = None,
) -> List[Reservation]:
    clashes = [
        r
        for r in existing
        if r.status in BLOCKING_RESERVATION_STATUSES
        and r.id != exclude_id
        and overlaps(r.start_time, r.end_time, start, end)
    ]
    return sorted(clashes, key=lambda r: (r.start_time, r.id))


def describe_conflicts(conflicts: Sequence[Reservation]) -> list[dict]:
    return [
        {
            "id": r.id,
            "contact_name": r.contact_name,
            "start_time": r.start_time.strftime("%H:%M"),
            "end_time": r.end_time.strftime("%H:%M"),
            "status": r.status.value,
        }
        for r in conflicts
    ]


def free_slots(
    *,
    window_start: time,
    window_end: time,
    busy: Iterable[Reservation],
    min_minutes: int,
) -> list[dict]:
    """Gaps of the opening window not covered by `busy`, each >= min_minutes."""
    slots: list[dict] = []
    cursor = window_start

    for r in sorted(busy, key=lambda x: x.start_time):
        if r.end_time <= cursor:
            continue
        if r.start_time >= window_end:
            break
        if r.start_time > cursor and minutes_between(cursor, r.start_time) >= min_minutes:
            slots.append({"start_time": cursor, "end_time": r.start_time})
        cursor = max(cursor, r.end_time)

    if cursor < window_end and minutes_between(cursor, window_end) >= min_minutes:
        slots.append({"start_time": cursor, "end_time": window_end})
    return slots


def calculate_total_amount(config: ReservationConfig, duration_minutes: int) -> Decimal:
    if config.hourly_rate:
        return to_money(config.hourly_rate * Decimal(duration_minutes) / Decimal(60))
    if config.daily_rate and duration_minutes >= FULL_DAY_MINUTES:
        return to_money(config.daily_rate)
    return Decimal("0.00")
