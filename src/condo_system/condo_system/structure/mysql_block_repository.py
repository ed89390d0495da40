from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Block
from .repository import BlockRepository

COLUMNS = ("condominium_id", "name", "description", "floors", "units_per_floor", "active")


def _row_to_block(r: dict) -> Block:
    return Block(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        name=r["name"],
        description=r.get("description"),
        floors=r.get("floors"),
        units_per_floor=r.get("units_per_floor"),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLBlockRepository(BlockRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO blocks({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, block_id: int) -> Optional[Block]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM blocks WHERE id=%s", (int(block_id),))
            r = fetchone(cur)
            return _row_to_block(r) if r else None

    def update(self, *, block_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE blocks SET {build_update(cols)} WHERE id=%s", tuple(params) + (int(block_id),))
            return cur.rowcount >= 0

    def delete(self, *, block_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM blocks WHERE id=%s", (int(block_id),))
            return cur.rowcount > 0

    def list_by_condominium(self, *, condominium_id: int, limit: int = 200, offset: int = 0) -> Sequence[Block]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM blocks
                WHERE condominium_id=%s
                ORDER BY name
                LIMIT %s OFFSET %s
                """,
                (int(condominium_id), int(limit), int(offset)),
            )
            return [_row_to_block(r) for r in fetchall(cur)]
