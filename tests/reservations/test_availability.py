from datetime import date, time
from decimal import Decimal

from src.condo_system.condo_system.core.enums import ReservationStatus, Weekday
from src.condo_system.condo_system.reservations.availability import (
    calculate_total_amount,
    find_conflicts,
    free_slots,
    overlaps,
)
from src.condo_system.condo_system.reservations.model import Reservation, ReservationConfig


def _booking(rid, start, end, status=ReservationStatus.CONFIRMED):
    return Reservation(
        id=rid,
        space_id=1,
        condominium_id=1,
        reservation_date=date(2025, 3, 15),
        start_time=start,
        end_time=end,
        duration_minutes=0,
        contact_name=f"Contato {rid}",
        contact_phone="11999990000",
        status=status,
    )


def _config(**overrides):
    base = dict(
        id=1,
        space_id=1,
        condominium_id=1,
        available_days=(Weekday.SATURDAY,),
        start_time=time(10, 0),
        end_time=time(22, 0),
    )
    base.update(overrides)
    return ReservationConfig(**base)


def test_touching_intervals_do_not_overlap():
    assert not overlaps(time(10), time(12), time(12), time(14))
    assert overlaps(time(10), time(12), time(11, 59), time(14))


def test_find_conflicts_ignores_cancelled_and_excluded():
    existing = [
        _booking(1, time(14), time(16)),
        _booking(2, time(15), time(17), status=ReservationStatus.CANCELLED),
        _booking(3, time(15), time(18), status=ReservationStatus.PENDING),
    ]
    clashes = find_conflicts(existing, start=time(15), end=time(16))
    assert [r.id for r in clashes] == [1, 3]

    clashes = find_conflicts(existing, start=time(15), end=time(16), exclude_id=1)
    assert [r.id for r in clashes] == [3]


def test_free_slots_respect_minimum_length():
    busy = [_booking(1, time(11), time(13)), _booking(2, time(14), time(16))]
    slots = free_slots(window_start=time(10), window_end=time(22), busy=busy, min_minutes=120)
    # 10-11 and 13-14 are too short
    assert slots == [{"start_time": time(16), "end_time": time(22)}]


def test_free_slots_whole_window_when_empty():
    slots = free_slots(window_start=time(8), window_end=time(12), busy=[], min_minutes=60)
    assert slots == [{"start_time": time(8), "end_time": time(12)}]


def test_hourly_rate_is_prorated():
    assert calculate_total_amount(_config(hourly_rate=Decimal("50")), 150) == Decimal("125.00")


def test_daily_rate_applies_to_full_day_only():
    cfg = _config(daily_rate=Decimal("300"))
    assert calculate_total_amount(cfg, 480) == Decimal("300.00")
    assert calculate_total_amount(cfg, 240) == Decimal("0.00")


def test_config_allows_day():
    cfg = _config()
    assert cfg.allows_day(date(2025, 3, 15))
    assert not cfg.allows_day(date(2025, 3, 16))
