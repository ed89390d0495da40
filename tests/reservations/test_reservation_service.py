from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.condo_system.condo_system.core.enums import ReservationStatus
from src.condo_system.condo_system.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

SATURDAY = "2025-03-15"


@pytest.fixture
def hall(container, condo):
    space = container.space_service.create(
        {
            "condominium_id": condo.condominium.id,
            "number": "SF-01",
            "space_type": "party_hall",
            "reservable": True,
        }
    )
    container.reservation_config_service.create(
        {
            "condominium_id": condo.condominium.id,
            "space_id": space.id,
            "available_days": ["saturday", "sunday"],
            "start_time": "10:00",
            "end_time": "22:00",
            "duration_minutes": 120,
            "min_advance_hours": 24,
            "max_advance_days": 30,
            "max_reservations_per_day": 2,
            "hourly_rate": "50.00",
        }
    )
    return space


def _book(container, space, start, end, day=SATURDAY, **extra):
    payload = {
        "space_id": space.id,
        "reservation_date": day,
        "start_time": start,
        "end_time": end,
        "contact_name": "Ana Paula",
        "contact_phone": "11988880000",
    }
    payload.update(extra)
    return container.reservation_service.create(payload)


def test_create_prices_and_stays_pending(container, hall, condo):
    r = _book(container, hall, "14:00", "16:00", unit_id=condo.units[0].id)
    assert r.status == ReservationStatus.PENDING
    assert r.duration_minutes == 120
    assert r.total_amount == Decimal("100.00")
    assert r.condominium_id == condo.condominium.id


def test_past_date_is_rejected(container, hall):
    with pytest.raises(ValidationError):
        _book(container, hall, "14:00", "16:00", day="2025-03-08")


def test_end_must_be_after_start(container, hall):
    with pytest.raises(ValidationError):
        _book(container, hall, "16:00", "14:00")


def test_advance_rule_is_checked_before_weekday(container, hall):
    # today (a Monday) is not an allowed day either, but the advance rule comes first
    with pytest.raises(BusinessRuleError, match="24 hours"):
        _book(container, hall, "10:00", "12:00", day="2025-03-10")


def test_weekday_not_allowed(container, hall):
    with pytest.raises(BusinessRuleError, match="tuesday"):
        _book(container, hall, "10:00", "12:00", day="2025-03-11")


def test_too_far_in_advance(container, hall):
    with pytest.raises(BusinessRuleError, match="30 days"):
        _book(container, hall, "10:00", "12:00", day="2025-04-19")


def test_outside_opening_hours(container, hall):
    with pytest.raises(BusinessRuleError, match="between 10:00 and 22:00"):
        _book(container, hall, "21:00", "23:00")


def test_minimum_duration(container, hall):
    with pytest.raises(BusinessRuleError, match="120 minutes"):
        _book(container, hall, "14:00", "15:00")


def test_overlapping_booking_conflicts(container, hall):
    first = _book(container, hall, "14:00", "16:00")
    with pytest.raises(ConflictError) as exc:
        _book(container, hall, "15:00", "17:00")
    assert [c["id"] for c in exc.value.conflicts] == [first.id]


def test_back_to_back_bookings_are_allowed(container, hall):
    _book(container, hall, "14:00", "16:00")
    r = _book(container, hall, "16:00", "18:00")
    assert r.start_time == time(16, 0)


def test_daily_cap(container, hall):
    _book(container, hall, "10:00", "12:00")
    _book(container, hall, "12:00", "14:00")
    with pytest.raises(BusinessRuleError, match="Daily limit"):
        _book(container, hall, "18:00", "20:00")


def test_conflicts_are_listed_by_start_time(container, hall):
    cfg = container.reservation_config_service.availability_config(hall.id)
    container.reservation_config_service.update(cfg.id, {"max_reservations_per_day": None})
    late = _book(container, hall, "16:00", "18:00")
    early = _book(container, hall, "12:00", "14:00")

    with pytest.raises(ConflictError) as exc:
        _book(container, hall, "13:00", "17:00")
    assert [c["id"] for c in exc.value.conflicts] == [early.id, late.id]
    assert [c["start_time"] for c in exc.value.conflicts] == ["12:00", "16:00"]


@pytest.mark.parametrize("change", [{"status": "maintenance"}, {"reservable": False}])
def test_unavailable_space_cannot_be_booked(container, hall, change):
    container.space_service.update(hall.id, change)
    with pytest.raises(BusinessRuleError, match="not available for reservations"):
        _book(container, hall, "14:00", "16:00")


def test_fractional_guest_count_is_rejected(container, hall):
    with pytest.raises(ValidationError, match="expected_guests"):
        _book(container, hall, "14:00", "16:00", expected_guests=2.7)

    r = _book(container, hall, "14:00", "16:00", expected_guests=3.0)
    assert r.expected_guests == 3


def test_cancelled_booking_frees_the_slot(container, hall):
    r = _book(container, hall, "14:00", "16:00")
    container.reservation_service.cancel(r.id, "mudou de ideia")
    again = _book(container, hall, "14:00", "16:00")
    assert again.id != r.id


def test_space_without_config(container, condo):
    space = container.space_service.create(
        {"condominium_id": condo.condominium.id, "number": "SR", "reservable": True}
    )
    with pytest.raises(BusinessRuleError, match="not configured"):
        _book(container, space, "14:00", "16:00")


def test_unknown_space(container, hall):
    with pytest.raises(NotFoundError):
        container.reservation_service.create(
            {
                "space_id": 999,
                "reservation_date": SATURDAY,
                "start_time": "14:00",
                "end_time": "16:00",
                "contact_name": "X",
                "contact_phone": "1",
            }
        )


def test_unit_from_other_condominium(container, hall):
    other = container.condominium_service.create({"name": "Outro"})
    foreign = container.unit_service.create({"condominium_id": other.id, "number": "1"})
    with pytest.raises(ValidationError):
        _book(container, hall, "14:00", "16:00", unit_id=foreign.id)


def test_confirm_complete_lifecycle(container, hall, clock):
    r = _book(container, hall, "14:00", "16:00")
    confirmed = container.reservation_service.confirm(r.id)
    assert confirmed.status == ReservationStatus.CONFIRMED
    assert confirmed.confirmed_at == clock.now

    with pytest.raises(BusinessRuleError):
        container.reservation_service.confirm(r.id)
    with pytest.raises(BusinessRuleError):
        container.reservation_service.reject(r.id)

    done = container.reservation_service.complete(r.id)
    assert done.status == ReservationStatus.COMPLETED


def test_reject_keeps_reason_in_admin_notes(container, hall):
    r = _book(container, hall, "14:00", "16:00")
    rejected = container.reservation_service.reject(r.id, "Evento nao permitido")
    assert rejected.status == ReservationStatus.REJECTED
    assert rejected.admin_notes == "Evento nao permitido"


def test_cancel_uses_default_reason(container, hall):
    r = _book(container, hall, "14:00", "16:00")
    cancelled = container.reservation_service.cancel(r.id)
    assert cancelled.status == ReservationStatus.CANCELLED
    assert cancelled.cancellation_reason == "Cancelled by user"


def test_cannot_cancel_on_the_day(container, hall, clock):
    r = _book(container, hall, "14:00", "16:00")
    clock.now = datetime(2025, 3, 15, 8, 0)
    with pytest.raises(BusinessRuleError):
        container.reservation_service.cancel(r.id)


def test_update_moves_slot_without_clashing_with_itself(container, hall):
    r = _book(container, hall, "14:00", "16:00")
    moved = container.reservation_service.update(r.id, {"start_time": "15:00", "end_time": "18:00"})
    assert moved.start_time == time(15, 0)
    assert moved.duration_minutes == 180
    assert moved.total_amount == Decimal("150.00")


def test_update_contact_only_skips_schedule_checks(container, hall, clock):
    r = _book(container, hall, "14:00", "16:00")
    # closer than the advance window, but the slot does not change
    clock.now = datetime(2025, 3, 14, 20, 0)
    updated = container.reservation_service.update(r.id, {"contact_phone": "11900001111"})
    assert updated.contact_phone == "11900001111"


def test_availability_lists_free_slots(container, hall):
    _book(container, hall, "14:00", "16:00")
    info = container.reservation_service.availability(hall.id, SATURDAY)
    assert info["available"] is True
    assert [r["start_time"] for r in info["existing_reservations"]] == [time(14, 0)]
    assert info["free_slots"] == [
        {"start_time": time(10, 0), "end_time": time(14, 0)},
        {"start_time": time(16, 0), "end_time": time(22, 0)},
    ]


def test_availability_on_closed_day(container, hall):
    info = container.reservation_service.availability(hall.id, "2025-03-12")
    assert info == {"available": False, "reason": "Weekday not available for this space"}


def test_stats_by_status_and_month(container, hall, condo):
    a = _book(container, hall, "10:00", "12:00")
    _book(container, hall, "14:00", "16:00")
    container.reservation_service.confirm(a.id)

    stats = container.reservation_service.stats(condo.condominium.id)
    assert stats["total"] == 2
    assert stats["pending"] == 1
    assert stats["confirmed"] == 1
    assert stats["this_month"] == 2
    assert stats["next_month"] == 0


def test_list_filters_by_status(container, hall, condo):
    a = _book(container, hall, "10:00", "12:00")
    _book(container, hall, "14:00", "16:00")
    container.reservation_service.confirm(a.id)

    confirmed = container.reservation_service.list(condo.condominium.id, status="confirmed")
    assert [r.id for r in confirmed] == [a.id]
    assert date(2025, 3, 15) == confirmed[0].reservation_date
