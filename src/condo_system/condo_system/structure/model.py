from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import UnitStatus, UnitType


@dataclass(frozen=True)
class Condominium:
    id: int
    name: str
    address: Optional[str] = None
    number: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Block:
    id: int
    condominium_id: int
    name: str
    description: Optional[str] = None
    floors: Optional[int] = None
    units_per_floor: Optional[int] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Unit:
    id: int
    condominium_id: int
    number: str
    block_id: Optional[int] = None
    type: UnitType = UnitType.APARTMENT
    floor: Optional[int] = None
    area: Optional[Decimal] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    status: UnitStatus = UnitStatus.VACANT
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
