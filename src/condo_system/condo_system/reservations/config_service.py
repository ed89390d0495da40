from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import to_time
from ..common.validators import merge_payload, optional_str, require_id, to_bool, to_decimal, to_enum, to_int
from ..core.constants import DEFAULT_MAX_ADVANCE_DAYS, DEFAULT_MIN_ADVANCE_HOURS, DEFAULT_RESERVATION_DURATION_MINUTES
from ..core.enums import Weekday
from ..core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from ..spaces.repository import SpaceRepository
from .model import ReservationConfig, default_config
from .repository import ReservationConfigRepository

logger = logging.getLogger(__name__)


def _parse_days(value) -> tuple[Weekday, ...]:
    if isinstance(value, str):
        value = [v for v in value.split(",") if v.strip()]
    if not value:
        raise ValidationError("available_days must contain at least one day")
    days: list[Weekday] = []
    for raw in value:
        day = to_enum(Weekday, str(raw).strip().lower() if not isinstance(raw, Weekday) else raw, "available_days")
        if day not in days:
            days.append(day)
    return tuple(days)


class ReservationConfigService:
    def __init__(self, configs: ReservationConfigRepository, spaces: SpaceRepository):
        self._configs = configs
        self._spaces = spaces

    def _clean(self, payload: dict, *, config_id: Optional[int] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        space_id = require_id(payload.get("space_id"), "space_id")

        space = self._spaces.get(space_id=space_id)
        if not space:
            raise NotFoundError("Space not found")
        if space.condominium_id != condominium_id:
            raise ValidationError("Space does not belong to this condominium")
        if not space.reservable:
            raise BusinessRuleError("Space is not marked as reservable")

        start = to_time(payload.get("start_time"), "start_time")
        end = to_time(payload.get("end_time"), "end_time")
        if end <= start:
            raise ValidationError("end_time must be after start_time")

        active = to_bool(payload.get("active"), default=True)
        if active:
            current = self._configs.get_active_for_space(space_id=space_id)
            if current and current.id != config_id:
                raise ConflictError("This space already has an active reservation configuration")

        return {
            "space_id": space_id,
            "condominium_id": condominium_id,
            "available_days": _parse_days(payload.get("available_days")),
            "start_time": start,
            "end_time": end,
            "duration_minutes": to_int(payload.get("duration_minutes"), "duration_minutes", min_value=15, max_value=1440)
            or DEFAULT_RESERVATION_DURATION_MINUTES,
            "min_advance_hours": to_int(payload.get("min_advance_hours"), "min_advance_hours", min_value=1, max_value=168)
            or DEFAULT_MIN_ADVANCE_HOURS,
            "max_advance_days": to_int(payload.get("max_advance_days"), "max_advance_days", min_value=1, max_value=365)
            or DEFAULT_MAX_ADVANCE_DAYS,
            "max_reservations_per_day": to_int(
                payload.get("max_reservations_per_day"), "max_reservations_per_day", min_value=1
            ),
            "max_reservations_per_user_per_month": to_int(
                payload.get("max_reservations_per_user_per_month"), "max_reservations_per_user_per_month", min_value=1
            ),
            "hourly_rate": to_decimal(payload.get("hourly_rate"), "hourly_rate"),
            "daily_rate": to_decimal(payload.get("daily_rate"), "daily_rate"),
            "active": active,
            "description": optional_str(payload.get("description")),
        }

    def get(self, config_id: int) -> ReservationConfig:
        cfg = self._configs.get(config_id=require_id(config_id, "config_id"))
        if not cfg:
            raise NotFoundError("Reservation configuration not found")
        return cfg

    def list_by_condominium(self, condominium_id: int, *, active_only: bool = False) -> Sequence[ReservationConfig]:
        return self._configs.list_by_condominium(
            condominium_id=require_id(condominium_id, "condominium_id"), active_only=active_only
        )

    def create(self, payload: dict) -> ReservationConfig:
        data = self._clean(payload)
        new_id = self._configs.create(data=data)
        logger.info("Reservation config %s created for space %s", new_id, data["space_id"])
        return self.get(new_id)

    def update(self, config_id: int, payload: dict) -> ReservationConfig:
        existing = self.get(config_id)
        data = self._clean(merge_payload(payload, existing), config_id=existing.id)
        self._configs.update(config_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, config_id: int) -> None:
        existing = self.get(config_id)
        self._configs.delete(config_id=existing.id)

    def reservable_spaces(self, condominium_id: int) -> list[dict]:
        out: list[dict] = []
        for cfg in self.list_by_condominium(condominium_id, active_only=True):
            space = self._spaces.get(space_id=cfg.space_id)
            if space and space.can_be_reserved:
                out.append({**space.to_dict(), "reservation_config": cfg})
        return out

    def availability_config(self, space_id: int) -> ReservationConfig:
        space = self._spaces.get(space_id=require_id(space_id, "space_id"))
        if not space:
            raise NotFoundError("Space not found")
        cfg = self._configs.get_active_for_space(space_id=space.id)
        return cfg or default_config(space_id=space.id, condominium_id=space.condominium_id)
