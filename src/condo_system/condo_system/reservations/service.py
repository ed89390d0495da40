from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import add_months, first_day_of_month, minutes_between, now_local, to_date, to_time
from ..common.validators import (
    optional_email,
    optional_id,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_enum,
    to_int,
)
from ..core.enums import BLOCKING_RESERVATION_STATUSES, ReservationPaymentStatus, ReservationStatus, Weekday
from ..core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from ..spaces.model import Space
from ..spaces.repository import SpaceRepository
from ..structure.repository import UnitRepository
from .availability import calculate_total_amount, describe_conflicts, find_conflicts, free_slots
from .model import Reservation, ReservationConfig
from .repository import ReservationConfigRepository, ReservationRepository

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_REASON = "Cancelled by user"


class ReservationService:
    """Booking of common spaces.

    A new booking is checked against the space's active configuration in a
    fixed order (advance window, weekday, opening hours, minimum duration,
    daily cap) and finally against the pending/confirmed bookings already on
    that space and date. The first violated rule is reported.

    The overlap check and the insert run on separate connections and the
    reservations table has no constraint covering time ranges, so two
    concurrent requests for the same slot can both be accepted.
    TODO: take a per-space lock (SELECT ... FOR UPDATE on the space row)
    around the check and insert once the repositories share a transaction.
    """

    def __init__(
        self,
        reservations: ReservationRepository,
        configs: ReservationConfigRepository,
        spaces: SpaceRepository,
        units: UnitRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._reservations = reservations
        self._configs = configs
        self._spaces = spaces
        self._units = units
        self._clock = clock

    # -------- helpers --------
    def _space_and_config(self, space_id: int) -> tuple[Space, ReservationConfig]:
        space = self._spaces.get(space_id=space_id)
        if not space:
            raise NotFoundError("Space not found")
        cfg = self._configs.get_active_for_space(space_id=space.id)
        if not cfg:
            raise BusinessRuleError("This space is not configured for reservations")
        return space, cfg

    def _check_schedule(
        self,
        *,
        space: Space,
        cfg: ReservationConfig,
        reservation_date: date,
        start: time,
        end: time,
        exclude_id: Optional[int] = None,
    ) -> int:
        """Apply the scheduling rules; return the booking length in minutes."""
        if not space.can_be_reserved:
            raise BusinessRuleError("This space is not available for reservations")

        now = self._clock()
        hours_ahead = (datetime.combine(reservation_date, start) - now).total_seconds() / 3600
        if hours_ahead < cfg.min_advance_hours:
            raise BusinessRuleError(f"Reservations must be made at least {cfg.min_advance_hours} hours in advance")

        if (reservation_date - now.date()).days > cfg.max_advance_days:
            raise BusinessRuleError(f"Reservations can be made at most {cfg.max_advance_days} days in advance")

        if not cfg.allows_day(reservation_date):
            raise BusinessRuleError(
                f"This space is not available on {Weekday.from_date(reservation_date).value}"
            )

        if start < cfg.start_time or end > cfg.end_time:
            raise BusinessRuleError(
                f"Reservations must be between {cfg.start_time:%H:%M} and {cfg.end_time:%H:%M}"
            )

        duration = minutes_between(start, end)
        if duration < cfg.duration_minutes:
            raise BusinessRuleError(f"Minimum reservation length is {cfg.duration_minutes} minutes")

        same_day = self._reservations.list_for_space_date(
            space_id=space.id, reservation_date=reservation_date, statuses=BLOCKING_RESERVATION_STATUSES
        )
        same_day = [r for r in same_day if r.id != exclude_id]

        if cfg.max_reservations_per_day is not None and len(same_day) >= cfg.max_reservations_per_day:
            raise BusinessRuleError(
                f"Daily limit of {cfg.max_reservations_per_day} reservations reached for this space"
            )

        conflicts = find_conflicts(same_day, start=start, end=end)
        if conflicts:
            logger.info(
                "Reservation rejected: space=%s date=%s %s-%s clashes with %s",
                space.id,
                reservation_date,
                start,
                end,
                [c.id for c in conflicts],
            )
            raise ConflictError("There is already a reservation at this time", conflicts=describe_conflicts(conflicts))

        return duration

    def _validate_unit(self, unit_id: Optional[int], condominium_id: int) -> Optional[int]:
        if unit_id is None:
            return None
        unit = self._units.get(unit_id=unit_id)
        if not unit:
            raise NotFoundError("Unit not found")
        if unit.condominium_id != condominium_id:
            raise ValidationError("Unit does not belong to the space's condominium")
        return unit_id

    @staticmethod
    def _contact_fields(payload: dict) -> dict:
        guests = to_int(payload.get("expected_guests"), "expected_guests", min_value=1)
        return {
            "contact_name": require_max_length(
                require_non_empty(payload.get("contact_name"), "contact_name"), "contact_name", 255
            ),
            "contact_phone": require_max_length(
                require_non_empty(payload.get("contact_phone"), "contact_phone"), "contact_phone", 20
            ),
            "contact_email": optional_email(payload.get("contact_email"), "contact_email"),
            "event_type": require_max_length(optional_str(payload.get("event_type")), "event_type", 255),
            "event_description": require_max_length(
                optional_str(payload.get("event_description")), "event_description", 1000
            ),
            "expected_guests": guests,
            "user_notes": require_max_length(optional_str(payload.get("user_notes")), "user_notes", 1000),
        }

    def _parse_slot(self, payload: dict) -> tuple[date, time, time]:
        reservation_date = to_date(payload.get("reservation_date"), "reservation_date")
        start = to_time(payload.get("start_time"), "start_time")
        end = to_time(payload.get("end_time"), "end_time")
        if end <= start:
            raise ValidationError("end_time must be after start_time")
        return reservation_date, start, end

    # -------- queries --------
    def get(self, reservation_id: int) -> Reservation:
        r = self._reservations.get(reservation_id=require_id(reservation_id, "reservation_id"))
        if not r:
            raise NotFoundError("Reservation not found")
        return r

    def list(
        self,
        condominium_id: int,
        *,
        status=None,
        space_id=None,
        unit_id=None,
        start_date=None,
        end_date=None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Reservation]:
        return self._reservations.list(
            condominium_id=require_id(condominium_id, "condominium_id"),
            status=to_enum(ReservationStatus, status, "status") if status else None,
            space_id=optional_id(space_id, "space_id"),
            unit_id=optional_id(unit_id, "unit_id"),
            start_date=to_date(start_date, "start_date", required=False),
            end_date=to_date(end_date, "end_date", required=False),
            search=optional_str(search),
            limit=limit,
            offset=offset,
        )

    def availability(self, space_id: int, on_date) -> dict:
        space_id = require_id(space_id, "space_id")
        day = to_date(on_date, "date")
        space, cfg = self._space_and_config(space_id)

        if not cfg.allows_day(day):
            return {"available": False, "reason": "Weekday not available for this space"}

        existing = self._reservations.list_for_space_date(
            space_id=space.id, reservation_date=day, statuses=BLOCKING_RESERVATION_STATUSES
        )
        return {
            "available": True,
            "config": {
                "start_time": cfg.start_time,
                "end_time": cfg.end_time,
                "duration_minutes": cfg.duration_minutes,
                "hourly_rate": cfg.hourly_rate,
                "daily_rate": cfg.daily_rate,
            },
            "existing_reservations": [
                {
                    "id": r.id,
                    "start_time": r.start_time,
                    "end_time": r.end_time,
                    "contact_name": r.contact_name,
                    "status": r.status,
                }
                for r in existing
            ],
            "free_slots": free_slots(
                window_start=cfg.start_time,
                window_end=cfg.end_time,
                busy=existing,
                min_minutes=cfg.duration_minutes,
            ),
        }

    def stats(self, condominium_id: int) -> dict:
        condominium_id = require_id(condominium_id, "condominium_id")
        month_start = first_day_of_month(self._clock().date())
        next_month = add_months(month_start, 1)
        month_after = add_months(month_start, 2)

        out = {"total": self._reservations.count(condominium_id=condominium_id)}
        for status in ReservationStatus:
            out[status.value] = self._reservations.count(condominium_id=condominium_id, status=status)
        out["this_month"] = self._reservations.count(
            condominium_id=condominium_id, date_from=month_start, date_to=next_month
        )
        out["next_month"] = self._reservations.count(
            condominium_id=condominium_id, date_from=next_month, date_to=month_after
        )
        return out

    # -------- commands --------
    def create(self, payload: dict) -> Reservation:
        space_id = require_id(payload.get("space_id"), "space_id")
        reservation_date, start, end = self._parse_slot(payload)
        contact = self._contact_fields(payload)
        unit_id = optional_id(payload.get("unit_id"), "unit_id")
        user_id = optional_id(payload.get("user_id"), "user_id")

        if reservation_date < self._clock().date():
            raise ValidationError("reservation_date cannot be in the past")

        space, cfg = self._space_and_config(space_id)
        duration = self._check_schedule(space=space, cfg=cfg, reservation_date=reservation_date, start=start, end=end)
        unit_id = self._validate_unit(unit_id, space.condominium_id)

        total = calculate_total_amount(cfg, duration)
        data = {
            "space_id": space.id,
            "condominium_id": space.condominium_id,
            "unit_id": unit_id,
            "user_id": user_id,
            "reservation_date": reservation_date,
            "start_time": start,
            "end_time": end,
            "duration_minutes": duration,
            **contact,
            "status": ReservationStatus.PENDING,
            "total_amount": total if total > 0 else None,
            "paid_amount": 0,
            "payment_status": ReservationPaymentStatus.PENDING,
        }
        new_id = self._reservations.create(data=data)
        logger.info(
            "Reservation %s created: space=%s date=%s %s-%s",
            new_id,
            space.id,
            reservation_date,
            start.strftime("%H:%M"),
            end.strftime("%H:%M"),
        )
        return self.get(new_id)

    def update(self, reservation_id: int, payload: dict) -> Reservation:
        existing = self.get(reservation_id)
        today = self._clock().date()
        if not existing.can_be_cancelled(today):
            raise BusinessRuleError("This reservation can no longer be changed")

        merged = {
            "space_id": existing.space_id,
            "reservation_date": existing.reservation_date,
            "start_time": existing.start_time,
            "end_time": existing.end_time,
            "contact_name": existing.contact_name,
            "contact_phone": existing.contact_phone,
            "contact_email": existing.contact_email,
            "event_type": existing.event_type,
            "event_description": existing.event_description,
            "expected_guests": existing.expected_guests,
            "user_notes": existing.user_notes,
            "unit_id": existing.unit_id,
            **(payload or {}),
        }
        space_id = require_id(merged.get("space_id"), "space_id")
        reservation_date, start, end = self._parse_slot(merged)
        data = self._contact_fields(merged)

        slot_changed = (
            space_id != existing.space_id
            or reservation_date != existing.reservation_date
            or start != existing.start_time
            or end != existing.end_time
        )
        space = self._spaces.get(space_id=space_id)
        if not space:
            raise NotFoundError("Space not found")

        if slot_changed:
            if reservation_date < today:
                raise ValidationError("reservation_date cannot be in the past")
            space, cfg = self._space_and_config(space_id)
            duration = self._check_schedule(
                space=space,
                cfg=cfg,
                reservation_date=reservation_date,
                start=start,
                end=end,
                exclude_id=existing.id,
            )
            total = calculate_total_amount(cfg, duration)
            data.update(
                {
                    "space_id": space.id,
                    "condominium_id": space.condominium_id,
                    "reservation_date": reservation_date,
                    "start_time": start,
                    "end_time": end,
                    "duration_minutes": duration,
                    "total_amount": total if total > 0 else None,
                }
            )

        data["unit_id"] = self._validate_unit(optional_id(merged.get("unit_id"), "unit_id"), space.condominium_id)
        self._reservations.update(reservation_id=existing.id, data=data)
        return self.get(existing.id)

    def confirm(self, reservation_id: int) -> Reservation:
        r = self.get(reservation_id)
        if not r.can_be_confirmed():
            raise BusinessRuleError("Only pending reservations can be confirmed")
        self._reservations.update(
            reservation_id=r.id,
            data={"status": ReservationStatus.CONFIRMED, "confirmed_at": self._clock()},
        )
        logger.info("Reservation %s confirmed", r.id)
        return self.get(r.id)

    def cancel(self, reservation_id: int, reason: Optional[str] = None) -> Reservation:
        r = self.get(reservation_id)
        if not r.can_be_cancelled(self._clock().date()):
            raise BusinessRuleError("This reservation cannot be cancelled")
        self._reservations.update(
            reservation_id=r.id,
            data={
                "status": ReservationStatus.CANCELLED,
                "cancelled_at": self._clock(),
                "cancellation_reason": optional_str(reason) or DEFAULT_CANCELLATION_REASON,
            },
        )
        logger.info("Reservation %s cancelled", r.id)
        return self.get(r.id)

    def reject(self, reservation_id: int, reason: Optional[str] = None) -> Reservation:
        r = self.get(reservation_id)
        if r.status != ReservationStatus.PENDING:
            raise BusinessRuleError("Only pending reservations can be rejected")
        self._reservations.update(
            reservation_id=r.id,
            data={"status": ReservationStatus.REJECTED, "admin_notes": optional_str(reason)},
        )
        logger.info("Reservation %s rejected", r.id)
        return self.get(r.id)

    def complete(self, reservation_id: int) -> Reservation:
        r = self.get(reservation_id)
        if r.status != ReservationStatus.CONFIRMED:
            raise BusinessRuleError("Only confirmed reservations can be completed")
        self._reservations.update(reservation_id=r.id, data={"status": ReservationStatus.COMPLETED})
        return self.get(r.id)
