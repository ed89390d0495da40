from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import to_date
from ..common.validators import (
    digits_only,
    merge_payload,
    optional_email,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_enum,
    to_int,
)
from ..core.constants import ALL_ROWS
from ..core.enums import PersonStatus, UnitStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..structure.repository import CondominiumRepository, UnitRepository
from .model import Resident
from .repository import ResidentRepository

logger = logging.getLogger(__name__)

TENANT_FIELDS = (
    "tenant_name",
    "tenant_email",
    "tenant_phone",
    "tenant_cpf",
    "lease_start",
    "lease_end",
    "tenant_notes",
)


def _cpf(value, field_name: str) -> Optional[str]:
    cpf = digits_only(optional_str(value))
    if cpf is not None and len(cpf) != 11:
        raise ValidationError(f"{field_name} must have 11 digits")
    return cpf


class ResidentService:
    def __init__(self, residents: ResidentRepository, condominiums: CondominiumRepository, units: UnitRepository):
        self._residents = residents
        self._condominiums = condominiums
        self._units = units

    def _clean(self, payload: dict, *, resident_id: Optional[int] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        unit_id = require_id(payload.get("unit_id"), "unit_id")
        unit = self._units.get(unit_id=unit_id)
        if not unit:
            raise NotFoundError("Unit not found")
        if unit.condominium_id != condominium_id:
            raise ValidationError("Unit does not belong to this condominium")

        active = to_bool(payload.get("active"), default=True)
        if active:
            current = self._residents.find_active_for_unit(unit_id=unit_id)
            if current and current.id != resident_id:
                raise ConflictError(f"Unit {unit.number} already has an active resident record")

        data = {
            "condominium_id": condominium_id,
            "unit_id": unit_id,
            "unit_status": to_enum(UnitStatus, payload.get("unit_status"), "unit_status", default=UnitStatus.OCCUPIED),
            "owner_name": require_max_length(require_non_empty(payload.get("owner_name"), "owner_name"), "owner_name", 255),
            "owner_email": optional_email(payload.get("owner_email"), "owner_email"),
            "owner_phone": optional_str(payload.get("owner_phone")),
            "owner_cpf": _cpf(payload.get("owner_cpf"), "owner_cpf"),
            "owner_status": to_enum(PersonStatus, payload.get("owner_status"), "owner_status", default=PersonStatus.ACTIVE),
            "owner_notes": optional_str(payload.get("owner_notes")),
            "has_tenant": to_bool(payload.get("has_tenant")),
            "total_residents": to_int(payload.get("total_residents"), "total_residents", min_value=1) or 1,
            "notes": optional_str(payload.get("notes")),
            "active": active,
        }

        if not data["has_tenant"]:
            data.update({f: None for f in TENANT_FIELDS})
            data["tenant_status"] = PersonStatus.INACTIVE
            return data

        lease_start = to_date(payload.get("lease_start"), "lease_start", required=False)
        lease_end = to_date(payload.get("lease_end"), "lease_end", required=False)
        if lease_start and lease_end and lease_end < lease_start:
            raise ValidationError("lease_end cannot be before lease_start")

        data.update(
            {
                "tenant_name": require_max_length(
                    require_non_empty(payload.get("tenant_name"), "tenant_name"), "tenant_name", 255
                ),
                "tenant_email": optional_email(payload.get("tenant_email"), "tenant_email"),
                "tenant_phone": optional_str(payload.get("tenant_phone")),
                "tenant_cpf": _cpf(payload.get("tenant_cpf"), "tenant_cpf"),
                "tenant_status": to_enum(
                    PersonStatus, payload.get("tenant_status"), "tenant_status", default=PersonStatus.ACTIVE
                ),
                "lease_start": lease_start,
                "lease_end": lease_end,
                "tenant_notes": optional_str(payload.get("tenant_notes")),
            }
        )
        return data

    def get(self, resident_id: int) -> Resident:
        r = self._residents.get(resident_id=require_id(resident_id, "resident_id"))
        if not r:
            raise NotFoundError("Resident not found")
        return r

    def list_by_condominium(
        self,
        condominium_id: int,
        *,
        search: Optional[str] = None,
        with_tenant: Optional[bool] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Resident]:
        return self._residents.list_by_condominium(
            condominium_id=require_id(condominium_id, "condominium_id"),
            search=optional_str(search),
            with_tenant=with_tenant,
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Resident:
        data = self._clean(payload)
        new_id = self._residents.create(data=data)
        logger.info("Resident %s registered for unit %s", new_id, data["unit_id"])
        return self.get(new_id)

    def update(self, resident_id: int, payload: dict) -> Resident:
        existing = self.get(resident_id)
        data = self._clean(merge_payload(payload, existing), resident_id=existing.id)
        self._residents.update(resident_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, resident_id: int) -> None:
        existing = self.get(resident_id)
        self._residents.delete(resident_id=existing.id)

    def stats(self, condominium_id: int) -> dict:
        rows = self.list_by_condominium(condominium_id, limit=ALL_ROWS)
        with_tenant = sum(1 for r in rows if r.has_tenant)
        return {
            "total": len(rows),
            "with_tenant": with_tenant,
            "without_tenant": len(rows) - with_tenant,
            "total_residents": sum(r.total_residents for r in rows),
        }
