from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_datetime
from ..common.validators import (
    merge_payload,
    optional_id,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_enum,
)
from ..core.constants import ALL_ROWS, RECENT_INCIDENT_DAYS
from ..core.enums import IncidentPriority, IncidentReporter, IncidentStatus, IncidentType
from ..core.exceptions import NotFoundError, ValidationError
from ..structure.repository import BlockRepository, CondominiumRepository, UnitRepository
from .model import INCIDENT_PRIORITY_LABELS, INCIDENT_STATUS_LABELS, INCIDENT_TYPE_LABELS, Incident
from .repository import IncidentRepository

logger = logging.getLogger(__name__)

# statuses that bring an incident back to the queue
REOPENED_STATUSES = frozenset({IncidentStatus.OPEN, IncidentStatus.IN_PROGRESS})


def _catalogue(labels: dict) -> list[dict]:
    return [{"value": k.value, "label": v} for k, v in labels.items()]


class IncidentService:
    def __init__(
        self,
        incidents: IncidentRepository,
        condominiums: CondominiumRepository,
        blocks: BlockRepository,
        units: UnitRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._incidents = incidents
        self._condominiums = condominiums
        self._blocks = blocks
        self._units = units
        self._clock = clock

    def _clean(self, payload: dict, *, existing: Optional[Incident] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        block_id = optional_id(payload.get("block_id"), "block_id")
        if block_id is not None:
            block = self._blocks.get(block_id=block_id)
            if not block or block.condominium_id != condominium_id:
                raise ValidationError("Block does not belong to this condominium")

        unit_id = optional_id(payload.get("unit_id"), "unit_id")
        if unit_id is not None:
            unit = self._units.get(unit_id=unit_id)
            if not unit or unit.condominium_id != condominium_id:
                raise ValidationError("Unit does not belong to this condominium")
            if block_id is None:
                block_id = unit.block_id

        status = to_enum(IncidentStatus, payload.get("status"), "status", default=IncidentStatus.OPEN)
        resolution = optional_str(payload.get("resolution"))
        resolved_at = to_datetime(payload.get("resolved_at"), "resolved_at", required=False)
        if status == IncidentStatus.RESOLVED:
            if not resolution:
                raise ValidationError("resolution is required to resolve an incident")
            if existing is None or existing.status != IncidentStatus.RESOLVED or resolved_at is None:
                resolved_at = self._clock()
        elif status in REOPENED_STATUSES:
            resolved_at = None

        return {
            "condominium_id": condominium_id,
            "block_id": block_id,
            "unit_id": unit_id,
            "resident_id": optional_id(payload.get("resident_id"), "resident_id"),
            "user_id": optional_id(payload.get("user_id"), "user_id"),
            "title": require_max_length(require_non_empty(payload.get("title"), "title"), "title", 255),
            "description": require_non_empty(payload.get("description"), "description"),
            "type": to_enum(IncidentType, payload.get("type"), "type"),
            "priority": to_enum(IncidentPriority, payload.get("priority"), "priority"),
            "status": status,
            "location": require_max_length(require_non_empty(payload.get("location"), "location"), "location", 255),
            "incident_date": to_datetime(payload.get("incident_date"), "incident_date", required=False)
            or self._clock(),
            "resolution": resolution,
            "resolved_at": resolved_at,
            "reported_by": to_enum(
                IncidentReporter, payload.get("reported_by"), "reported_by", default=IncidentReporter.ADMINISTRATION
            ),
            "is_anonymous": to_bool(payload.get("is_anonymous")),
        }

    def get(self, incident_id: int) -> Incident:
        i = self._incidents.get(incident_id=require_id(incident_id, "incident_id"))
        if not i:
            raise NotFoundError("Incident not found")
        return i

    def list(
        self,
        condominium_id: int,
        *,
        status=None,
        incident_type=None,
        priority=None,
        block_id=None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Incident]:
        return self._incidents.list(
            condominium_id=require_id(condominium_id, "condominium_id"),
            status=to_enum(IncidentStatus, status, "status") if status else None,
            incident_type=to_enum(IncidentType, incident_type, "type") if incident_type else None,
            priority=to_enum(IncidentPriority, priority, "priority") if priority else None,
            block_id=optional_id(block_id, "block_id"),
            search=optional_str(search),
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Incident:
        data = self._clean(payload)
        new_id = self._incidents.create(data=data)
        logger.info("Incident %s opened (%s, %s)", new_id, data["type"].value, data["priority"].value)
        return self.get(new_id)

    def update(self, incident_id: int, payload: dict) -> Incident:
        existing = self.get(incident_id)
        data = self._clean(merge_payload(payload, existing), existing=existing)
        self._incidents.update(incident_id=existing.id, data=data)
        if data["status"] != existing.status:
            logger.info("Incident %s moved %s -> %s", existing.id, existing.status.value, data["status"].value)
        return self.get(existing.id)

    def delete(self, incident_id: int) -> None:
        existing = self.get(incident_id)
        self._incidents.delete(incident_id=existing.id)

    def stats(self, condominium_id: int) -> dict:
        rows = self.list(condominium_id, limit=ALL_ROWS)
        since = self._clock() - timedelta(days=RECENT_INCIDENT_DAYS)
        return {
            "total": len(rows),
            "by_status": {s.value: sum(1 for i in rows if i.status == s) for s in IncidentStatus},
            "by_priority": {p.value: sum(1 for i in rows if i.priority == p) for p in IncidentPriority},
            "by_type": {t.value: sum(1 for i in rows if i.type == t) for t in IncidentType},
            "recent": sum(1 for i in rows if (i.created_at or i.incident_date) >= since),
        }

    @staticmethod
    def types() -> list[dict]:
        return _catalogue(INCIDENT_TYPE_LABELS)

    @staticmethod
    def priorities() -> list[dict]:
        return _catalogue(INCIDENT_PRIORITY_LABELS)

    @staticmethod
    def statuses() -> list[dict]:
        return _catalogue(INCIDENT_STATUS_LABELS)
