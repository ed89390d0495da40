from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import IncidentPriority, IncidentReporter, IncidentStatus, IncidentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Incident
from .repository import IncidentRepository

COLUMNS = (
    "condominium_id",
    "block_id",
    "unit_id",
    "resident_id",
    "user_id",
    "title",
    "description",
    "type",
    "priority",
    "status",
    "location",
    "incident_date",
    "resolution",
    "resolved_at",
    "reported_by",
    "is_anonymous",
)


def _row_to_incident(r: dict) -> Incident:
    return Incident(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        block_id=r.get("block_id"),
        unit_id=r.get("unit_id"),
        resident_id=r.get("resident_id"),
        user_id=r.get("user_id"),
        title=r["title"],
        description=r["description"],
        type=IncidentType(r["type"]),
        priority=IncidentPriority(r["priority"]),
        status=IncidentStatus(r["status"]),
        location=r["location"],
        incident_date=r["incident_date"],
        resolution=r.get("resolution"),
        resolved_at=r.get("resolved_at"),
        reported_by=IncidentReporter(r["reported_by"]),
        is_anonymous=as_bool(r.get("is_anonymous")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLIncidentRepository(IncidentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO incidents({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, incident_id: int) -> Optional[Incident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM incidents WHERE id=%s", (int(incident_id),))
            r = fetchone(cur)
            return _row_to_incident(r) if r else None

    def update(self, *, incident_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE incidents SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(incident_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, incident_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM incidents WHERE id=%s", (int(incident_id),))
            return cur.rowcount > 0

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
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if incident_type is not None:
            clauses.append("type=%s")
            params.append(incident_type.value)
        if priority is not None:
            clauses.append("priority=%s")
            params.append(priority.value)
        if block_id is not None:
            clauses.append("block_id=%s")
            params.append(int(block_id))
        if search:
            clauses.append("(title LIKE %s OR description LIKE %s OR location LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM incidents
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_incident(r) for r in fetchall(cur)]
