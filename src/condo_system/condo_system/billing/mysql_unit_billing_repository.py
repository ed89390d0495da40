from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

import mysql.connector

from ..core.enums import BillingStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import ZERO, UnitBilling
from .repository import UnitBillingRepository

COLUMNS = (
    "monthly_fee_id",
    "unit_id",
    "ideal_fraction",
    "base_amount",
    "additional_charges",
    "discounts",
    "total_amount",
    "barcode",
    "digitable_line",
    "our_number",
    "due_date",
    "status",
    "payment_date",
    "amount_paid",
    "late_fee",
    "interest",
    "notes",
)


def _row_to_billing(r: dict) -> UnitBilling:
    return UnitBilling(
        id=int(r["id"]),
        monthly_fee_id=int(r["monthly_fee_id"]),
        unit_id=int(r["unit_id"]),
        ideal_fraction=as_decimal(r.get("ideal_fraction")) or as_decimal(0),
        base_amount=as_decimal(r["base_amount"]),
        additional_charges=as_decimal(r.get("additional_charges")) or ZERO,
        discounts=as_decimal(r.get("discounts")) or ZERO,
        total_amount=as_decimal(r["total_amount"]),
        barcode=r.get("barcode"),
        digitable_line=r.get("digitable_line"),
        our_number=r.get("our_number"),
        due_date=r["due_date"],
        status=BillingStatus(r["status"]),
        payment_date=r.get("payment_date"),
        amount_paid=as_decimal(r.get("amount_paid")) or ZERO,
        late_fee=as_decimal(r.get("late_fee")) or ZERO,
        interest=as_decimal(r.get("interest")) or ZERO,
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLUnitBillingRepository(UnitBillingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        return self.create_many(rows=[data])[0]

    def create_many(self, *, rows: Sequence[dict]) -> list[int]:
        """Insert all rows in one transaction.

        A unit billed concurrently for the same fee trips uq_unit_billings_fee_unit;
        the whole batch is rolled back and reported as a conflict.
        """
        ids: list[int] = []
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for data in rows:
                    cols, params = split_update(data, COLUMNS)
                    cur.execute(
                        f"INSERT INTO unit_billings({', '.join(cols)}) VALUES({placeholders(cols)})",
                        tuple(params),
                    )
                    ids.append(int(cur.lastrowid))
        except mysql.connector.IntegrityError as e:
            raise ConflictError(
                "Some units are already billed for this monthly fee",
                conflicts=[{"unit_id": data.get("unit_id")}],
            ) from e
        return ids

    def get(self, *, unit_billing_id: int) -> Optional[UnitBilling]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM unit_billings WHERE id=%s", (int(unit_billing_id),))
            r = fetchone(cur)
            return _row_to_billing(r) if r else None

    def update(self, *, unit_billing_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE unit_billings SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(unit_billing_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, unit_billing_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM unit_billings WHERE id=%s", (int(unit_billing_id),))
            return cur.rowcount > 0

    def billed_unit_ids(self, *, monthly_fee_id: int, unit_ids: Iterable[int]) -> set[int]:
        ids = [int(u) for u in unit_ids]
        if not ids:
            return set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT unit_id FROM unit_billings WHERE monthly_fee_id=%s AND unit_id IN ({placeholders(ids)})",
                (int(monthly_fee_id), *ids),
            )
            return {int(r["unit_id"]) for r in fetchall(cur)}

    def list(
        self,
        *,
        monthly_fee_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        status: Optional[BillingStatus] = None,
        condominium_id: Optional[int] = None,
        overdue_on: Optional[date] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[UnitBilling]:
        clauses = ["1=1"]
        params: list[object] = []
        if monthly_fee_id is not None:
            clauses.append("ub.monthly_fee_id=%s")
            params.append(int(monthly_fee_id))
        if unit_id is not None:
            clauses.append("ub.unit_id=%s")
            params.append(int(unit_id))
        if status is not None:
            clauses.append("ub.status=%s")
            params.append(status.value)
        if condominium_id is not None:
            clauses.append("mf.condominium_id=%s")
            params.append(int(condominium_id))
        if overdue_on is not None:
            clauses.append("ub.status NOT IN ('paid','cancelled') AND ub.due_date < %s")
            params.append(overdue_on)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ub.*
                FROM unit_billings ub
                JOIN monthly_fees mf ON mf.id = ub.monthly_fee_id
                WHERE {' AND '.join(clauses)}
                ORDER BY ub.due_date DESC, ub.id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_billing(r) for r in fetchall(cur)]
