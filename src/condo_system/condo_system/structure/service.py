from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional, Sequence

from ..common.validators import (
    merge_payload,
    optional_email,
    optional_id,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_decimal,
    to_enum,
    to_int,
)
from ..core.enums import UnitStatus, UnitType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Block, Condominium, Unit
from .repository import BlockRepository, CondominiumRepository, UnitRepository

logger = logging.getLogger(__name__)


class CondominiumService:
    def __init__(self, condominiums: CondominiumRepository, blocks: BlockRepository, units: UnitRepository):
        self._condominiums = condominiums
        self._blocks = blocks
        self._units = units

    @staticmethod
    def _clean(payload: dict) -> dict:
        state = optional_str(payload.get("state"))
        return {
            "name": require_max_length(require_non_empty(payload.get("name"), "name"), "name", 255),
            "address": optional_str(payload.get("address")),
            "number": optional_str(payload.get("number")),
            "district": optional_str(payload.get("district")),
            "city": optional_str(payload.get("city")),
            "state": state.upper() if state else None,
            "zip_code": optional_str(payload.get("zip_code")),
            "phone": optional_str(payload.get("phone")),
            "email": optional_email(payload.get("email")),
            "description": optional_str(payload.get("description")),
            "active": to_bool(payload.get("active"), default=True),
        }

    def get(self, condominium_id: int) -> Condominium:
        c = self._condominiums.get(condominium_id=require_id(condominium_id, "condominium_id"))
        if not c:
            raise NotFoundError("Condominium not found")
        return c

    def list(self, *, active_only: bool = False, search: Optional[str] = None, limit: int = 200, offset: int = 0):
        return self._condominiums.list(active_only=active_only, search=search, limit=limit, offset=offset)

    def create(self, payload: dict) -> Condominium:
        data = self._clean(payload)
        new_id = self._condominiums.create(data=data)
        logger.info("Condominium %s created (%s)", new_id, data["name"])
        return self.get(new_id)

    def update(self, condominium_id: int, payload: dict) -> Condominium:
        existing = self.get(condominium_id)
        data = self._clean(merge_payload(payload, existing))
        self._condominiums.update(condominium_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, condominium_id: int) -> None:
        existing = self.get(condominium_id)
        self._condominiums.delete(condominium_id=existing.id)
        logger.info("Condominium %s deleted", existing.id)

    def complete_structure(self, condominium_id: int) -> dict:
        condominium = self.get(condominium_id)
        blocks = self._blocks.list_by_condominium(condominium_id=condominium.id, limit=10_000)
        units = self._units.list_by_condominium(condominium_id=condominium.id, limit=100_000)

        by_block: dict[Optional[int], list[Unit]] = {}
        for u in units:
            by_block.setdefault(u.block_id, []).append(u)

        return {
            "condominium": condominium,
            "blocks": [{**asdict(b), "units": by_block.get(b.id, [])} for b in blocks],
            "units_without_block": by_block.get(None, []),
        }


class BlockService:
    def __init__(self, blocks: BlockRepository, condominiums: CondominiumRepository, units: UnitRepository):
        self._blocks = blocks
        self._condominiums = condominiums
        self._units = units

    def _clean(self, payload: dict) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")
        return {
            "condominium_id": condominium_id,
            "name": require_max_length(require_non_empty(payload.get("name"), "name"), "name", 255),
            "description": optional_str(payload.get("description")),
            "floors": to_int(payload.get("floors"), "floors", min_value=1),
            "units_per_floor": to_int(payload.get("units_per_floor"), "units_per_floor", min_value=1),
            "active": to_bool(payload.get("active"), default=True),
        }

    def get(self, block_id: int) -> Block:
        b = self._blocks.get(block_id=require_id(block_id, "block_id"))
        if not b:
            raise NotFoundError("Block not found")
        return b

    def list_by_condominium(self, condominium_id: int, *, limit: int = 200, offset: int = 0) -> Sequence[Block]:
        return self._blocks.list_by_condominium(
            condominium_id=require_id(condominium_id, "condominium_id"), limit=limit, offset=offset
        )

    def create(self, payload: dict) -> Block:
        data = self._clean(payload)
        return self.get(self._blocks.create(data=data))

    def update(self, block_id: int, payload: dict) -> Block:
        existing = self.get(block_id)
        data = self._clean(merge_payload(payload, existing))
        self._blocks.update(block_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, block_id: int) -> None:
        existing = self.get(block_id)
        self._blocks.delete(block_id=existing.id)

    def stats(self, condominium_id: int) -> dict:
        condominium_id = require_id(condominium_id, "condominium_id")
        blocks = self._blocks.list_by_condominium(condominium_id=condominium_id, limit=10_000)
        units = self._units.list_by_condominium(condominium_id=condominium_id, limit=100_000)
        return {
            "total_blocks": len(blocks),
            "active_blocks": sum(1 for b in blocks if b.active),
            "total_units": len(units),
        }


class UnitService:
    def __init__(self, units: UnitRepository, condominiums: CondominiumRepository, blocks: BlockRepository):
        self._units = units
        self._condominiums = condominiums
        self._blocks = blocks

    def _clean(self, payload: dict, *, unit_id: Optional[int] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        block_id = optional_id(payload.get("block_id"), "block_id")
        if block_id is not None:
            block = self._blocks.get(block_id=block_id)
            if not block:
                raise NotFoundError("Block not found")
            if block.condominium_id != condominium_id:
                raise ValidationError("Block does not belong to this condominium")

        number = require_max_length(require_non_empty(payload.get("number"), "number"), "number", 50)
        clash = self._units.find_by_number(condominium_id=condominium_id, block_id=block_id, number=number)
        if clash and clash.id != unit_id:
            raise ConflictError(f"Unit {number} already exists in this block")

        return {
            "condominium_id": condominium_id,
            "block_id": block_id,
            "number": number,
            "type": to_enum(UnitType, payload.get("type"), "type", default=UnitType.APARTMENT),
            "floor": to_int(payload.get("floor"), "floor"),
            "area": to_decimal(payload.get("area"), "area"),
            "bedrooms": to_int(payload.get("bedrooms"), "bedrooms", min_value=0),
            "bathrooms": to_int(payload.get("bathrooms"), "bathrooms", min_value=0),
            "status": to_enum(UnitStatus, payload.get("status"), "status", default=UnitStatus.VACANT),
            "description": optional_str(payload.get("description")),
            "active": to_bool(payload.get("active"), default=True),
        }

    def get(self, unit_id: int) -> Unit:
        u = self._units.get(unit_id=require_id(unit_id, "unit_id"))
        if not u:
            raise NotFoundError("Unit not found")
        return u

    def list_by_condominium(
        self,
        condominium_id: int,
        *,
        block_id=None,
        status=None,
        unit_type=None,
        limit: int = 1000,
        offset: int = 0,
    ) -> Sequence[Unit]:
        return self._units.list_by_condominium(
            condominium_id=require_id(condominium_id, "condominium_id"),
            block_id=optional_id(block_id, "block_id"),
            status=to_enum(UnitStatus, status, "status") if status else None,
            unit_type=to_enum(UnitType, unit_type, "type") if unit_type else None,
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Unit:
        data = self._clean(payload)
        new_id = self._units.create(data=data)
        logger.info("Unit %s created in condominium %s", data["number"], data["condominium_id"])
        return self.get(new_id)

    def update(self, unit_id: int, payload: dict) -> Unit:
        existing = self.get(unit_id)
        data = self._clean(merge_payload(payload, existing), unit_id=existing.id)
        self._units.update(unit_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, unit_id: int) -> None:
        existing = self.get(unit_id)
        self._units.delete(unit_id=existing.id)
