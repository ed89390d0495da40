from __future__ import annotations

from datetime import time

import pytest

from src.condo_system.condo_system.core.enums import Weekday
from src.condo_system.condo_system.core.exceptions import BusinessRuleError, ConflictError, ValidationError


@pytest.fixture
def gym(container, condo):
    return container.space_service.create(
        {"condominium_id": condo.condominium.id, "number": "AC-01", "space_type": "gym", "reservable": True}
    )


def _payload(condo, space, **overrides):
    base = {
        "condominium_id": condo.condominium.id,
        "space_id": space.id,
        "available_days": "monday, wednesday,friday",
        "start_time": "06:00",
        "end_time": "12:00",
    }
    base.update(overrides)
    return base


def test_days_accept_comma_separated_string(container, condo, gym):
    cfg = container.reservation_config_service.create(_payload(condo, gym))
    assert cfg.available_days == (Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY)
    assert cfg.duration_minutes == 60
    assert cfg.min_advance_hours == 24


def test_duplicate_days_are_collapsed(container, condo, gym):
    cfg = container.reservation_config_service.create(
        _payload(condo, gym, available_days=["Monday", "monday", "sunday"])
    )
    assert cfg.available_days == (Weekday.MONDAY, Weekday.SUNDAY)


def test_empty_days_rejected(container, condo, gym):
    with pytest.raises(ValidationError):
        container.reservation_config_service.create(_payload(condo, gym, available_days=[]))


def test_hours_must_be_ordered(container, condo, gym):
    with pytest.raises(ValidationError):
        container.reservation_config_service.create(_payload(condo, gym, start_time="12:00", end_time="06:00"))


def test_non_reservable_space_rejected(container, condo):
    storage = container.space_service.create({"condominium_id": condo.condominium.id, "number": "D-9"})
    with pytest.raises(BusinessRuleError):
        container.reservation_config_service.create(_payload(condo, storage))


def test_only_one_active_config_per_space(container, condo, gym):
    container.reservation_config_service.create(_payload(condo, gym))
    with pytest.raises(ConflictError):
        container.reservation_config_service.create(_payload(condo, gym))

    inactive = container.reservation_config_service.create(_payload(condo, gym, active=False))
    assert inactive.active is False


def test_update_keeps_config_active(container, condo, gym):
    cfg = container.reservation_config_service.create(_payload(condo, gym))
    updated = container.reservation_config_service.update(cfg.id, {"end_time": "14:00"})
    assert updated.end_time == time(14, 0)
    assert updated.available_days == cfg.available_days


def test_default_rules_for_unconfigured_space(container, gym):
    cfg = container.reservation_config_service.availability_config(gym.id)
    assert cfg.id is None
    assert cfg.available_days == tuple(Weekday)
    assert cfg.start_time == time(8, 0)
    assert cfg.end_time == time(22, 0)


def test_reservable_spaces_lists_configured_ones(container, condo, gym):
    container.reservation_config_service.create(_payload(condo, gym))
    spaces = container.reservation_config_service.reservable_spaces(condo.condominium.id)
    assert [s["number"] for s in spaces] == ["AC-01"]
    assert spaces[0]["reservation_config"].space_id == gym.id
