from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AnnouncementPriority, AnnouncementStatus, AnnouncementTarget
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Announcement
from .repository import AnnouncementRepository

COLUMNS = (
    "condominium_id",
    "user_id",
    "title",
    "content",
    "priority",
    "status",
    "target_type",
    "target_ids",
    "published_at",
    "expires_at",
    "notes",
    "active",
)


def _encode(data: dict) -> dict:
    if "target_ids" in data:
        data = {**data, "target_ids": json.dumps(list(data["target_ids"] or []))}
    return data


def _row_to_announcement(r: dict) -> Announcement:
    raw_ids = r.get("target_ids")
    target_ids = json.loads(raw_ids) if isinstance(raw_ids, (str, bytes)) else (raw_ids or [])
    return Announcement(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        user_id=r.get("user_id"),
        title=r["title"],
        content=r["content"],
        priority=AnnouncementPriority(r["priority"]),
        status=AnnouncementStatus(r["status"]),
        target_type=AnnouncementTarget(r["target_type"]),
        target_ids=tuple(int(i) for i in target_ids),
        published_at=r.get("published_at"),
        expires_at=r.get("expires_at"),
        notes=r.get("notes"),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(_encode(data), COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO announcements({', '.join(cols)}) VALUES({placeholders(cols)})",
                tuple(params),
            )
            return int(cur.lastrowid)

    def get(self, *, announcement_id: int) -> Optional[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM announcements WHERE id=%s", (int(announcement_id),))
            r = fetchone(cur)
            return _row_to_announcement(r) if r else None

    def update(self, *, announcement_id: int, data: dict) -> bool:
        cols, params = split_update(_encode(data), COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE announcements SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(announcement_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, announcement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM announcements WHERE id=%s", (int(announcement_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[AnnouncementStatus] = None,
        priority: Optional[AnnouncementPriority] = None,
        search: Optional[str] = None,
        current_at: Optional[datetime] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Announcement]:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if priority is not None:
            clauses.append("priority=%s")
            params.append(priority.value)
        if search:
            clauses.append("(title LIKE %s OR content LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like])
        if current_at is not None:
            clauses.append("status=%s AND active=1 AND (expires_at IS NULL OR expires_at >= %s)")
            params.extend([AnnouncementStatus.PUBLISHED.value, current_at])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM announcements
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_announcement(r) for r in fetchall(cur)]
