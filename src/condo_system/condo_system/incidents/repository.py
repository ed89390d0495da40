from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import IncidentPriority, IncidentStatus, IncidentType
from .model import Incident


class IncidentRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, incident_id: int) -> Optional[Incident]:
        raise NotImplementedError

    def update(self, *, incident_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, incident_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[IncidentStatus] = None,
        incident_type: Optional[IncidentType] = None,
        priority: Optional[IncidentPriority] = None,
        block_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Incident]:
        raise NotImplementedError
