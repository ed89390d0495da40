from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PersonStatus, UnitStatus


@dataclass(frozen=True)
class Resident:
    """Owner (and optional tenant) living in a unit."""

    id: int
    condominium_id: int
    unit_id: int
    owner_name: str
    unit_status: UnitStatus = UnitStatus.OCCUPIED
    owner_email: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_cpf: Optional[str] = None
    owner_status: PersonStatus = PersonStatus.ACTIVE
    owner_notes: Optional[str] = None
    has_tenant: bool = False
    tenant_name: Optional[str] = None
    tenant_email: Optional[str] = None
    tenant_phone: Optional[str] = None
    tenant_cpf: Optional[str] = None
    tenant_status: PersonStatus = PersonStatus.INACTIVE
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    tenant_notes: Optional[str] = None
    total_residents: int = 1
    notes: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
