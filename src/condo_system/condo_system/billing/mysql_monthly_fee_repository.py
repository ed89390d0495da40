from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import MonthlyFeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import MonthlyFee
from .repository import MonthlyFeeRepository

COLUMNS = ("condominium_id", "reference_month", "base_value", "due_date", "issue_date", "status", "notes")


def _row_to_fee(r: dict) -> MonthlyFee:
    return MonthlyFee(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        reference_month=r["reference_month"],
        base_value=as_decimal(r["base_value"]),
        due_date=r["due_date"],
        issue_date=r.get("issue_date"),
        status=MonthlyFeeStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLMonthlyFeeRepository(MonthlyFeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO monthly_fees({', '.join(cols)}) VALUES({placeholders(cols)})",
                tuple(params),
            )
            return int(cur.lastrowid)

    def get(self, *, monthly_fee_id: int) -> Optional[MonthlyFee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM monthly_fees WHERE id=%s", (int(monthly_fee_id),))
            r = fetchone(cur)
            return _row_to_fee(r) if r else None

    def update(self, *, monthly_fee_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE monthly_fees SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(monthly_fee_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, monthly_fee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM monthly_fees WHERE id=%s", (int(monthly_fee_id),))
            return cur.rowcount > 0

    def list(
        self,
        *,
        condominium_id: Optional[int] = None,
        status: Optional[MonthlyFeeStatus] = None,
        reference_month: Optional[date] = None,
        year: Optional[int] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[MonthlyFee]:
        clauses = ["1=1"]
        params: list[object] = []
        if condominium_id is not None:
            clauses.append("condominium_id=%s")
            params.append(int(condominium_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if reference_month is not None:
            clauses.append("reference_month=%s")
            params.append(reference_month)
        if year is not None:
            clauses.append("YEAR(reference_month)=%s")
            params.append(int(year))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM monthly_fees
                WHERE {' AND '.join(clauses)}
                ORDER BY reference_month DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_fee(r) for r in fetchall(cur)]
