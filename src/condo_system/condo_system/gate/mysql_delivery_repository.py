from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DeliveryStatus, DeliveryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Delivery
from .repository import DeliveryRepository

COLUMNS = (
    "unit_id",
    "recipient_name",
    "delivery_code",
    "type",
    "sender",
    "description",
    "status",
    "received_by",
    "received_at",
    "delivered_to",
    "collected_at",
    "notes",
)


def _row_to_delivery(r: dict) -> Delivery:
    return Delivery(
        id=int(r["id"]),
        unit_id=int(r["unit_id"]),
        recipient_name=r["recipient_name"],
        delivery_code=r["delivery_code"],
        type=DeliveryType(r["type"]),
        sender=r.get("sender"),
        description=r.get("description"),
        status=DeliveryStatus(r["status"]),
        received_by=r.get("received_by"),
        received_at=r.get("received_at"),
        delivered_to=r.get("delivered_to"),
        collected_at=r.get("collected_at"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLDeliveryRepository(DeliveryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO deliveries({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, delivery_id: int) -> Optional[Delivery]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM deliveries WHERE id=%s", (int(delivery_id),))
            r = fetchone(cur)
            return _row_to_delivery(r) if r else None

    def update(self, *, delivery_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE deliveries SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(delivery_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, delivery_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM deliveries WHERE id=%s", (int(delivery_id),))
            return cur.rowcount > 0

    def find_by_code(self, *, code: str) -> Optional[Delivery]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM deliveries WHERE delivery_code=%s LIMIT 1", (code,))
            r = fetchone(cur)
            return _row_to_delivery(r) if r else None

    def list(
        self,
        *,
        condominium_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        status: Optional[DeliveryStatus] = None,
        delivery_type: Optional[DeliveryType] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Delivery]:
        clauses = ["1=1"]
        params: list[object] = []
        if condominium_id is not None:
            clauses.append("u.condominium_id=%s")
            params.append(int(condominium_id))
        if unit_id is not None:
            clauses.append("d.unit_id=%s")
            params.append(int(unit_id))
        if status is not None:
            clauses.append("d.status=%s")
            params.append(status.value)
        if delivery_type is not None:
            clauses.append("d.type=%s")
            params.append(delivery_type.value)
        if search:
            clauses.append("(d.recipient_name LIKE %s OR d.delivery_code LIKE %s OR d.sender LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT d.* FROM deliveries d
                JOIN units u ON u.id = d.unit_id
                WHERE {' AND '.join(clauses)}
                ORDER BY d.received_at DESC, d.id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_delivery(r) for r in fetchall(cur)]
