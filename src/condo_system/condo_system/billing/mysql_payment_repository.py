from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PaymentMethod, PaymentSource
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Payment
from .repository import PaymentRepository

COLUMNS = (
    "unit_billing_id",
    "payment_date",
    "amount_paid",
    "payment_method",
    "reference",
    "bank_reference",
    "source",
    "notes",
)


def _row_to_payment(r: dict) -> Payment:
    return Payment(
        id=int(r["id"]),
        unit_billing_id=int(r["unit_billing_id"]),
        payment_date=r["payment_date"],
        amount_paid=as_decimal(r["amount_paid"]),
        payment_method=PaymentMethod(r["payment_method"]),
        reference=r.get("reference"),
        bank_reference=r.get("bank_reference"),
        source=PaymentSource(r["source"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO payments({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM payments WHERE id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def update(self, *, payment_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE payments SET {build_update(cols)} WHERE id=%s", tuple(params) + (int(payment_id),))
            return cur.rowcount >= 0

    def delete(self, *, payment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payments WHERE id=%s", (int(payment_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        unit_billing_id: Optional[int] = None,
        condominium_id: Optional[int] = None,
        payment_method: Optional[PaymentMethod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Payment]:
        clauses = ["1=1"]
        params: list[object] = []
        if unit_billing_id is not None:
            clauses.append("p.unit_billing_id=%s")
            params.append(int(unit_billing_id))
        if condominium_id is not None:
            clauses.append("mf.condominium_id=%s")
            params.append(int(condominium_id))
        if payment_method is not None:
            clauses.append("p.payment_method=%s")
            params.append(payment_method.value)
        if start_date is not None:
            clauses.append("p.payment_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("p.payment_date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT p.*
                FROM payments p
                JOIN unit_billings ub ON ub.id = p.unit_billing_id
                JOIN monthly_fees mf ON mf.id = ub.monthly_fee_id
                WHERE {' AND '.join(clauses)}
                ORDER BY p.payment_date DESC, p.id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_payment(r) for r in fetchall(cur)]
