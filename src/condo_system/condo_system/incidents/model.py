from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import IncidentPriority, IncidentReporter, IncidentStatus, IncidentType

INCIDENT_TYPE_LABELS = {
    IncidentType.MAINTENANCE: "Manutenção",
    IncidentType.SECURITY: "Segurança",
    IncidentType.NOISE: "Ruído/Barulho",
    IncidentType.CLEANING: "Limpeza",
    IncidentType.NEIGHBORHOOD: "Vizinhança",
    IncidentType.OTHER: "Outros",
}

INCIDENT_PRIORITY_LABELS = {
    IncidentPriority.LOW: "Baixa",
    IncidentPriority.MEDIUM: "Média",
    IncidentPriority.HIGH: "Alta",
    IncidentPriority.URGENT: "Urgente",
}

INCIDENT_STATUS_LABELS = {
    IncidentStatus.OPEN: "Aberta",
    IncidentStatus.IN_PROGRESS: "Em Andamento",
    IncidentStatus.RESOLVED: "Resolvida",
    IncidentStatus.CLOSED: "Fechada",
}


@dataclass(frozen=True)
class Incident:
    id: int
    condominium_id: int
    title: str
    description: str
    location: str
    incident_date: datetime
    type: IncidentType = IncidentType.OTHER
    priority: IncidentPriority = IncidentPriority.MEDIUM
    status: IncidentStatus = IncidentStatus.OPEN
    block_id: Optional[int] = None
    unit_id: Optional[int] = None
    resident_id: Optional[int] = None
    user_id: Optional[int] = None
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None
    reported_by: IncidentReporter = IncidentReporter.ADMINISTRATION
    is_anonymous: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            **asdict(self),
            "type_label": INCIDENT_TYPE_LABELS.get(self.type),
            "priority_label": INCIDENT_PRIORITY_LABELS.get(self.priority),
            "status_label": INCIDENT_STATUS_LABELS.get(self.status),
        }
