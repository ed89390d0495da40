from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Tuple

from ..core.constants import (
    DEFAULT_MAX_ADVANCE_DAYS,
    DEFAULT_MIN_ADVANCE_HOURS,
    DEFAULT_RESERVATION_DURATION_MINUTES,
    DEFAULT_RESERVATION_END,
    DEFAULT_RESERVATION_START,
)
from ..core.enums import ReservationPaymentStatus, ReservationStatus, Weekday


@dataclass(frozen=True)
class ReservationConfig:
    id: Optional[int]
    space_id: int
    condominium_id: int
    available_days: Tuple[Weekday, ...]
    start_time: time
    end_time: time
    duration_minutes: int = DEFAULT_RESERVATION_DURATION_MINUTES
    min_advance_hours: int = DEFAULT_MIN_ADVANCE_HOURS
    max_advance_days: int = DEFAULT_MAX_ADVANCE_DAYS
    max_reservations_per_day: Optional[int] = None
    max_reservations_per_user_per_month: Optional[int] = None
    hourly_rate: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None
    active: bool = True
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def allows_day(self, value: date) -> bool:
        return Weekday.from_date(value) in self.available_days


def default_config(*, space_id: int, condominium_id: int) -> ReservationConfig:
    """Rules applied to a space that has no active configuration yet."""
    return ReservationConfig(
        id=None,
        space_id=space_id,
        condominium_id=condominium_id,
        available_days=tuple(Weekday),
        start_time=time.fromisoformat(DEFAULT_RESERVATION_START),
        end_time=time.fromisoformat(DEFAULT_RESERVATION_END),
    )


@dataclass(frozen=True)
class Reservation:
    id: int
    space_id: int
    condominium_id: int
    reservation_date: date
    start_time: time
    end_time: time
    duration_minutes: int
    contact_name: str
    contact_phone: str
    unit_id: Optional[int] = None
    user_id: Optional[int] = None
    contact_email: Optional[str] = None
    event_type: Optional[str] = None
    event_description: Optional[str] = None
    expected_guests: Optional[int] = None
    status: ReservationStatus = ReservationStatus.PENDING
    total_amount: Optional[Decimal] = None
    paid_amount: Decimal = Decimal("0.00")
    payment_status: ReservationPaymentStatus = ReservationPaymentStatus.PENDING
    user_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def can_be_cancelled(self, today: date) -> bool:
        return self.status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED) and self.reservation_date > today

    def can_be_confirmed(self) -> bool:
        return self.status == ReservationStatus.PENDING
