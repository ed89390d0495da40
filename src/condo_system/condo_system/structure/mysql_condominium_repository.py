from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Condominium
from .repository import CondominiumRepository

COLUMNS = (
    "name",
    "address",
    "number",
    "district",
    "city",
    "state",
    "zip_code",
    "phone",
    "email",
    "description",
    "active",
)


def _row_to_condominium(r: dict) -> Condominium:
    return Condominium(
        id=int(r["id"]),
        name=r["name"],
        address=r.get("address"),
        number=r.get("number"),
        district=r.get("district"),
        city=r.get("city"),
        state=r.get("state"),
        zip_code=r.get("zip_code"),
        phone=r.get("phone"),
        email=r.get("email"),
        description=r.get("description"),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLCondominiumRepository(CondominiumRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO condominiums({', '.join(cols)}) VALUES({placeholders(cols)})",
                tuple(params),
            )
            return int(cur.lastrowid)

    def get(self, *, condominium_id: int) -> Optional[Condominium]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM condominiums WHERE id=%s", (int(condominium_id),))
            r = fetchone(cur)
            return _row_to_condominium(r) if r else None

    def update(self, *, condominium_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE condominiums SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(condominium_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, condominium_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM condominiums WHERE id=%s", (int(condominium_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        active_only: bool = False,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Condominium]:
        clauses = ["1=1"]
        params: list[object] = []
        if active_only:
            clauses.append("active=1")
        if search:
            clauses.append("(name LIKE %s OR city LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM condominiums
                WHERE {' AND '.join(clauses)}
                ORDER BY name
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_condominium(r) for r in fetchall(cur)]
