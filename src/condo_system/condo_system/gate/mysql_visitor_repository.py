from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import DocumentType, VisitorStatus, VisitorType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_bool,
    build_update,
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_time,
    placeholders,
    split_update,
)
from .model import Visitor
from .repository import VisitorRepository

COLUMNS = (
    "condominium_id",
    "unit_id",
    "resident_id",
    "name",
    "document_type",
    "document_number",
    "phone",
    "vehicle_plate",
    "vehicle_model",
    "vehicle_color",
    "visitor_type",
    "purpose",
    "scheduled_date",
    "scheduled_time",
    "entry_at",
    "exit_at",
    "status",
    "notes",
    "authorized_by",
    "validated_by",
    "validated_at",
    "active",
)


def _row_to_visitor(r: dict) -> Visitor:
    return Visitor(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        unit_id=r.get("unit_id"),
        resident_id=r.get("resident_id"),
        name=r["name"],
        document_type=DocumentType(r["document_type"]),
        document_number=r.get("document_number"),
        phone=r.get("phone"),
        vehicle_plate=r.get("vehicle_plate"),
        vehicle_model=r.get("vehicle_model"),
        vehicle_color=r.get("vehicle_color"),
        visitor_type=VisitorType(r["visitor_type"]),
        purpose=r.get("purpose"),
        scheduled_date=r.get("scheduled_date"),
        scheduled_time=normalize_mysql_time(r.get("scheduled_time")),
        entry_at=r.get("entry_at"),
        exit_at=r.get("exit_at"),
        status=VisitorStatus(r["status"]),
        notes=r.get("notes"),
        authorized_by=r.get("authorized_by"),
        validated_by=r.get("validated_by"),
        validated_at=r.get("validated_at"),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLVisitorRepository(VisitorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO visitors({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, visitor_id: int) -> Optional[Visitor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM visitors WHERE id=%s", (int(visitor_id),))
            r = fetchone(cur)
            return _row_to_visitor(r) if r else None

    def update(self, *, visitor_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE visitors SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(visitor_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, visitor_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM visitors WHERE id=%s", (int(visitor_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[VisitorStatus] = None,
        visitor_type: Optional[VisitorType] = None,
        unit_id: Optional[int] = None,
        scheduled_date: Optional[date] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Visitor]:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if visitor_type is not None:
            clauses.append("visitor_type=%s")
            params.append(visitor_type.value)
        if unit_id is not None:
            clauses.append("unit_id=%s")
            params.append(int(unit_id))
        if scheduled_date is not None:
            clauses.append("scheduled_date=%s")
            params.append(scheduled_date)
        if search:
            clauses.append("(name LIKE %s OR document_number LIKE %s OR vehicle_plate LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM visitors
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_visitor(r) for r in fetchall(cur)]
