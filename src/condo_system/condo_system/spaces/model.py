from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import SpaceStatus, SpaceType

SPACE_TYPE_LABELS = {
    SpaceType.STORAGE: "Depósito",
    SpaceType.BOX: "Box",
    SpaceType.CELLAR: "Adega",
    SpaceType.ATTIC: "Sótão",
    SpaceType.GAS_DEPOT: "Depósito de Gás",
    SpaceType.TRASH_DEPOT: "Depósito de Lixo",
    SpaceType.GYM: "Academia",
    SpaceType.PARTY_HALL: "Salão de Festas",
    SpaceType.MEETING_ROOM: "Sala de Reuniões",
    SpaceType.LAUNDRY: "Lavanderia",
    SpaceType.OTHER: "Outros",
}

SPACE_STATUS_LABELS = {
    SpaceStatus.AVAILABLE: "Disponível",
    SpaceStatus.OCCUPIED: "Ocupado",
    SpaceStatus.RESERVED: "Reservado",
    SpaceStatus.MAINTENANCE: "Manutenção",
}


@dataclass(frozen=True)
class Space:
    id: int
    condominium_id: int
    number: str
    space_type: SpaceType = SpaceType.STORAGE
    unit_id: Optional[int] = None
    location: Optional[str] = None
    area: Optional[Decimal] = None
    height: Optional[Decimal] = None
    status: SpaceStatus = SpaceStatus.AVAILABLE
    description: Optional[str] = None
    climate_controlled: bool = False
    reservable: bool = False
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def can_be_reserved(self) -> bool:
        return self.reservable and self.active and self.status != SpaceStatus.MAINTENANCE

    def to_dict(self) -> dict:
        return {
            **asdict(self),
            "type_name": SPACE_TYPE_LABELS.get(self.space_type, "Desconhecido"),
            "status_name": SPACE_STATUS_LABELS.get(self.status, "Desconhecido"),
            "can_be_reserved": self.can_be_reserved,
        }
