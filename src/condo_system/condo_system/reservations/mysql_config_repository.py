from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_bool,
    as_decimal,
    build_update,
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_time,
    placeholders,
    split_update,
)
from .model import ReservationConfig
from .repository import ReservationConfigRepository

COLUMNS = (
    "space_id",
    "condominium_id",
    "available_days",
    "start_time",
    "end_time",
    "duration_minutes",
    "min_advance_hours",
    "max_advance_days",
    "max_reservations_per_day",
    "max_reservations_per_user_per_month",
    "hourly_rate",
    "daily_rate",
    "active",
    "description",
)


def _encode(data: dict) -> dict:
    out = dict(data)
    if "available_days" in out:
        out["available_days"] = json.dumps([d.value if isinstance(d, Weekday) else d for d in out["available_days"]])
    return out


def _row_to_config(r: dict) -> ReservationConfig:
    days = r.get("available_days") or "[]"
    if isinstance(days, (bytes, bytearray)):
        days = days.decode("utf-8")
    return ReservationConfig(
        id=int(r["id"]),
        space_id=int(r["space_id"]),
        condominium_id=int(r["condominium_id"]),
        available_days=tuple(Weekday(d) for d in json.loads(days)),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        duration_minutes=int(r["duration_minutes"]),
        min_advance_hours=int(r["min_advance_hours"]),
        max_advance_days=int(r["max_advance_days"]),
        max_reservations_per_day=r.get("max_reservations_per_day"),
        max_reservations_per_user_per_month=r.get("max_reservations_per_user_per_month"),
        hourly_rate=as_decimal(r.get("hourly_rate")),
        daily_rate=as_decimal(r.get("daily_rate")),
        active=as_bool(r.get("active")),
        description=r.get("description"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLReservationConfigRepository(ReservationConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(_encode(data), COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO reservation_configs({', '.join(cols)}) VALUES({placeholders(cols)})",
                tuple(params),
            )
            return int(cur.lastrowid)

    def get(self, *, config_id: int) -> Optional[ReservationConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM reservation_configs WHERE id=%s", (int(config_id),))
            r = fetchone(cur)
            return _row_to_config(r) if r else None

    def update(self, *, config_id: int, data: dict) -> bool:
        cols, params = split_update(_encode(data), COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE reservation_configs SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(config_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, config_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM reservation_configs WHERE id=%s", (int(config_id),))
            return cur.rowcount > 0

    def get_active_for_space(self, *, space_id: int) -> Optional[ReservationConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM reservation_configs WHERE space_id=%s AND active=1 ORDER BY id DESC LIMIT 1",
                (int(space_id),),
            )
            r = fetchone(cur)
            return _row_to_config(r) if r else None

    def list_by_condominium(self, *, condominium_id: int, active_only: bool = False) -> Sequence[ReservationConfig]:
        sql = "SELECT * FROM reservation_configs WHERE condominium_id=%s"
        if active_only:
            sql += " AND active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY space_id, id", (int(condominium_id),))
            return [_row_to_config(r) for r in fetchall(cur)]
