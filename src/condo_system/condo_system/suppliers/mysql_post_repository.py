from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_decimal, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .post_model import SupplierPost
from .post_repository import SupplierPostRepository

COLUMNS = (
    "supplier_id",
    "title",
    "description",
    "services_offered",
    "image_path",
    "price",
    "contact_info",
    "instagram",
    "facebook",
    "whatsapp",
    "website",
    "catalog_url",
    "is_active",
    "expires_at",
)


def _row_to_post(r: dict) -> SupplierPost:
    return SupplierPost(
        id=int(r["id"]),
        supplier_id=int(r["supplier_id"]),
        title=r["title"],
        description=r["description"],
        services_offered=r.get("services_offered"),
        image_path=r.get("image_path"),
        price=as_decimal(r.get("price")),
        contact_info=r.get("contact_info"),
        instagram=r.get("instagram"),
        facebook=r.get("facebook"),
        whatsapp=r.get("whatsapp"),
        website=r.get("website"),
        catalog_url=r.get("catalog_url"),
        is_active=as_bool(r.get("is_active")),
        expires_at=r.get("expires_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSupplierPostRepository(SupplierPostRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO supplier_posts({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, post_id: int) -> Optional[SupplierPost]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM supplier_posts WHERE id=%s", (int(post_id),))
            r = fetchone(cur)
            return _row_to_post(r) if r else None

    def update(self, *, post_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE supplier_posts SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(post_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, post_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM supplier_posts WHERE id=%s", (int(post_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        supplier_id: Optional[int] = None,
        condominium_id: Optional[int] = None,
        search: Optional[str] = None,
        visible_on: Optional[date] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[SupplierPost]:
        clauses = ["1=1"]
        params: list[object] = []
        if supplier_id is not None:
            clauses.append("p.supplier_id=%s")
            params.append(int(supplier_id))
        if condominium_id is not None:
            clauses.append("s.condominium_id=%s")
            params.append(int(condominium_id))
        if search:
            clauses.append("(p.title LIKE %s OR p.description LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like])
        if visible_on is not None:
            clauses.append("p.is_active=1 AND (p.expires_at IS NULL OR p.expires_at > %s)")
            params.append(visible_on)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT p.* FROM supplier_posts p
                JOIN suppliers s ON s.id = p.supplier_id
                WHERE {' AND '.join(clauses)}
                ORDER BY p.created_at DESC, p.id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_post(r) for r in fetchall(cur)]
