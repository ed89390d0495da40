from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import ReservationPaymentStatus, ReservationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_decimal,
    build_update,
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_time,
    placeholders,
    split_update,
)
from .model import Reservation
from .repository import ReservationRepository

COLUMNS = (
    "space_id",
    "condominium_id",
    "unit_id",
    "user_id",
    "reservation_date",
    "start_time",
    "end_time",
    "duration_minutes",
    "contact_name",
    "contact_phone",
    "contact_email",
    "event_type",
    "event_description",
    "expected_guests",
    "status",
    "total_amount",
    "paid_amount",
    "payment_status",
    "user_notes",
    "admin_notes",
    "confirmed_at",
    "cancelled_at",
    "cancellation_reason",
)


def _row_to_reservation(r: dict) -> Reservation:
    return Reservation(
        id=int(r["id"]),
        space_id=int(r["space_id"]),
        condominium_id=int(r["condominium_id"]),
        unit_id=r.get("unit_id"),
        user_id=r.get("user_id"),
        reservation_date=r["reservation_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        duration_minutes=int(r["duration_minutes"]),
        contact_name=r["contact_name"],
        contact_phone=r["contact_phone"],
        contact_email=r.get("contact_email"),
        event_type=r.get("event_type"),
        event_description=r.get("event_description"),
        expected_guests=r.get("expected_guests"),
        status=ReservationStatus(r["status"]),
        total_amount=as_decimal(r.get("total_amount")),
        paid_amount=as_decimal(r.get("paid_amount")) or as_decimal(0),
        payment_status=ReservationPaymentStatus(r["payment_status"]),
        user_notes=r.get("user_notes"),
        admin_notes=r.get("admin_notes"),
        confirmed_at=r.get("confirmed_at"),
        cancelled_at=r.get("cancelled_at"),
        cancellation_reason=r.get("cancellation_reason"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLReservationRepository(ReservationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO reservations({', '.join(cols)}) VALUES({placeholders(cols)})",
                tuple(params),
            )
            return int(cur.lastrowid)

    def get(self, *, reservation_id: int) -> Optional[Reservation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM reservations WHERE id=%s", (int(reservation_id),))
            r = fetchone(cur)
            return _row_to_reservation(r) if r else None

    def update(self, *, reservation_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE reservations SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(reservation_id),),
            )
            return cur.rowcount >= 0

    def list_for_space_date(
        self,
        *,
        space_id: int,
        reservation_date: date,
        statuses: Iterable[ReservationStatus],
    ) -> Sequence[Reservation]:
        status_values = [s.value for s in statuses]
        if not status_values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM reservations
                WHERE space_id=%s AND reservation_date=%s AND status IN ({placeholders(status_values)})
                ORDER BY start_time, id
                """,
                (int(space_id), reservation_date, *status_values),
            )
            return [_row_to_reservation(r) for r in fetchall(cur)]

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[ReservationStatus] = None,
        space_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Reservation]:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if space_id is not None:
            clauses.append("space_id=%s")
            params.append(int(space_id))
        if unit_id is not None:
            clauses.append("unit_id=%s")
            params.append(int(unit_id))
        if start_date is not None:
            clauses.append("reservation_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("reservation_date<=%s")
            params.append(end_date)
        if search:
            clauses.append("(contact_name LIKE %s OR event_type LIKE %s OR event_description LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM reservations
                WHERE {' AND '.join(clauses)}
                ORDER BY reservation_date DESC, start_time DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_reservation(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        condominium_id: int,
        status: Optional[ReservationStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> int:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if date_from is not None:
            clauses.append("reservation_date>=%s")
            params.append(date_from)
        if date_to is not None:
            clauses.append("reservation_date<%s")
            params.append(date_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS c FROM reservations WHERE {' AND '.join(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["c"]) if r else 0
