from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SpaceStatus, SpaceType
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
from .model import Space
from .repository import SpaceRepository

COLUMNS = (
    "condominium_id",
    "unit_id",
    "number",
    "space_type",
    "location",
    "area",
    "height",
    "status",
    "description",
    "climate_controlled",
    "reservable",
    "active",
)


def row_to_space(r: dict) -> Space:
    return Space(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        unit_id=r.get("unit_id"),
        number=str(r["number"]),
        space_type=SpaceType(r["space_type"]),
        location=r.get("location"),
        area=as_decimal(r.get("area")),
        height=as_decimal(r.get("height")),
        status=SpaceStatus(r["status"]),
        description=r.get("description"),
        climate_controlled=as_bool(r.get("climate_controlled")),
        reservable=as_bool(r.get("reservable")),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSpaceRepository(SpaceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO spaces({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, space_id: int) -> Optional[Space]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM spaces WHERE id=%s", (int(space_id),))
            r = fetchone(cur)
            return row_to_space(r) if r else None

    def update(self, *, space_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE spaces SET {build_update(cols)} WHERE id=%s", tuple(params) + (int(space_id),))
            return cur.rowcount >= 0

    def delete(self, *, space_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM spaces WHERE id=%s", (int(space_id),))
            return cur.rowcount > 0

    def find_by_number(self, *, condominium_id: int, number: str) -> Optional[Space]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM spaces WHERE condominium_id=%s AND number=%s LIMIT 1",
                (int(condominium_id), number),
            )
            r = fetchone(cur)
            return row_to_space(r) if r else None

    def list_by_condominium(
        self,
        *,
        condominium_id: int,
        space_type: Optional[SpaceType] = None,
        status: Optional[SpaceStatus] = None,
        reservable: Optional[bool] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Space]:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if space_type is not None:
            clauses.append("space_type=%s")
            params.append(space_type.value)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if reservable is not None:
            clauses.append("reservable=%s")
            params.append(1 if reservable else 0)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM spaces
                WHERE {' AND '.join(clauses)}
                ORDER BY number
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [row_to_space(r) for r in fetchall(cur)]
