from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import UnitStatus, UnitType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_bool,
    as_decimal,
    build_update,
    db_cursor,
    fetchall,
    fetchone,
    placeholders,
    split_update,
)
from .model import Unit
from .repository import UnitRepository

COLUMNS = (
    "condominium_id",
    "block_id",
    "number",
    "type",
    "floor",
    "area",
    "bedrooms",
    "bathrooms",
    "status",
    "description",
    "active",
)


def _row_to_unit(r: dict) -> Unit:
    return Unit(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        block_id=r.get("block_id"),
        number=str(r["number"]),
        type=UnitType(r["type"]),
        floor=r.get("floor"),
        area=as_decimal(r.get("area")),
        bedrooms=r.get("bedrooms"),
        bathrooms=r.get("bathrooms"),
        status=UnitStatus(r["status"]),
        description=r.get("description"),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLUnitRepository(UnitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO units({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, unit_id: int) -> Optional[Unit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM units WHERE id=%s", (int(unit_id),))
            r = fetchone(cur)
            return _row_to_unit(r) if r else None

    def update(self, *, unit_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE units SET {build_update(cols)} WHERE id=%s", tuple(params) + (int(unit_id),))
            return cur.rowcount >= 0

    def delete(self, *, unit_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM units WHERE id=%s", (int(unit_id),))
            return cur.rowcount > 0

    def find_by_number(self, *, condominium_id: int, block_id: Optional[int], number: str) -> Optional[Unit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM units
                WHERE condominium_id=%s AND number=%s AND block_id <=> %s
                LIMIT 1
                """,
                (int(condominium_id), number, block_id),
            )
            r = fetchone(cur)
            return _row_to_unit(r) if r else None

    def list_by_condominium(
        self,
        *,
        condominium_id: int,
        block_id: Optional[int] = None,
        status: Optional[UnitStatus] = None,
        unit_type: Optional[UnitType] = None,
        active_only: bool = False,
        limit: int = 1000,
        offset: int = 0,
    ) -> Sequence[Unit]:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if block_id is not None:
            clauses.append("block_id=%s")
            params.append(int(block_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if unit_type is not None:
            clauses.append("type=%s")
            params.append(unit_type.value)
        if active_only:
            clauses.append("active=1")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM units
                WHERE {' AND '.join(clauses)}
                ORDER BY block_id, number
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_unit(r) for r in fetchall(cur)]
