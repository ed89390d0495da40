from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import (
    merge_payload,
    optional_id,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_decimal,
    to_enum,
)
from ..core.enums import SpaceStatus, SpaceType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..structure.repository import CondominiumRepository, UnitRepository
from .model import SPACE_STATUS_LABELS, SPACE_TYPE_LABELS, Space
from .repository import SpaceRepository


class SpaceService:
    def __init__(self, spaces: SpaceRepository, condominiums: CondominiumRepository, units: UnitRepository):
        self._spaces = spaces
        self._condominiums = condominiums
        self._units = units

    def _clean(self, payload: dict, *, space_id: Optional[int] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        unit_id = optional_id(payload.get("unit_id"), "unit_id")
        if unit_id is not None:
            unit = self._units.get(unit_id=unit_id)
            if not unit or unit.condominium_id != condominium_id:
                raise ValidationError("Unit does not belong to this condominium")

        number = require_max_length(require_non_empty(payload.get("number"), "number"), "number", 50)
        clash = self._spaces.find_by_number(condominium_id=condominium_id, number=number)
        if clash and clash.id != space_id:
            raise ConflictError(f"Space {number} already exists in this condominium")

        return {
            "condominium_id": condominium_id,
            "unit_id": unit_id,
            "number": number,
            "space_type": to_enum(SpaceType, payload.get("space_type"), "space_type", default=SpaceType.STORAGE),
            "location": optional_str(payload.get("location")),
            "area": to_decimal(payload.get("area"), "area"),
            "height": to_decimal(payload.get("height"), "height"),
            "status": to_enum(SpaceStatus, payload.get("status"), "status", default=SpaceStatus.AVAILABLE),
            "description": optional_str(payload.get("description")),
            "climate_controlled": to_bool(payload.get("climate_controlled")),
            "reservable": to_bool(payload.get("reservable")),
            "active": to_bool(payload.get("active"), default=True),
        }

    def get(self, space_id: int) -> Space:
        s = self._spaces.get(space_id=require_id(space_id, "space_id"))
        if not s:
            raise NotFoundError("Space not found")
        return s

    def list_by_condominium(
        self,
        condominium_id: int,
        *,
        space_type=None,
        status=None,
        reservable: Optional[bool] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Space]:
        return self._spaces.list_by_condominium(
            condominium_id=require_id(condominium_id, "condominium_id"),
            space_type=to_enum(SpaceType, space_type, "space_type") if space_type else None,
            status=to_enum(SpaceStatus, status, "status") if status else None,
            reservable=reservable,
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Space:
        return self.get(self._spaces.create(data=self._clean(payload)))

    def update(self, space_id: int, payload: dict) -> Space:
        existing = self.get(space_id)
        data = self._clean(merge_payload(payload, existing), space_id=existing.id)
        self._spaces.update(space_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, space_id: int) -> None:
        existing = self.get(space_id)
        self._spaces.delete(space_id=existing.id)

    @staticmethod
    def types() -> list[dict]:
        return [{"value": t.value, "label": label} for t, label in SPACE_TYPE_LABELS.items()]

    @staticmethod
    def statuses() -> list[dict]:
        return [{"value": s.value, "label": label} for s, label in SPACE_STATUS_LABELS.items()]
