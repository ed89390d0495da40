from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SupplierCategory, SupplierStatus, SupplierType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Supplier
from .repository import SupplierRepository

COLUMNS = (
    "condominium_id",
    "company_name",
    "trade_name",
    "cnpj",
    "cpf",
    "supplier_type",
    "category",
    "contact_name",
    "email",
    "phone",
    "mobile",
    "address",
    "number",
    "district",
    "city",
    "state",
    "zip_code",
    "services_description",
    "hourly_rate",
    "monthly_rate",
    "contract_start",
    "contract_end",
    "status",
    "evaluation",
    "emergency_contact",
    "notes",
)


def _row_to_supplier(r: dict) -> Supplier:
    return Supplier(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        company_name=r["company_name"],
        trade_name=r.get("trade_name"),
        cnpj=r.get("cnpj"),
        cpf=r.get("cpf"),
        supplier_type=SupplierType(r["supplier_type"]),
        category=SupplierCategory(r["category"]),
        contact_name=r["contact_name"],
        email=r.get("email"),
        phone=r.get("phone"),
        mobile=r.get("mobile"),
        address=r.get("address"),
        number=r.get("number"),
        district=r.get("district"),
        city=r.get("city"),
        state=r.get("state"),
        zip_code=r.get("zip_code"),
        services_description=r.get("services_description"),
        hourly_rate=as_decimal(r.get("hourly_rate")),
        monthly_rate=as_decimal(r.get("monthly_rate")),
        contract_start=r.get("contract_start"),
        contract_end=r.get("contract_end"),
        status=SupplierStatus(r["status"]),
        evaluation=as_decimal(r.get("evaluation")),
        emergency_contact=r.get("emergency_contact"),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSupplierRepository(SupplierRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO suppliers({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, supplier_id: int) -> Optional[Supplier]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM suppliers WHERE id=%s", (int(supplier_id),))
            r = fetchone(cur)
            return _row_to_supplier(r) if r else None

    def update(self, *, supplier_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE suppliers SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(supplier_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, supplier_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM suppliers WHERE id=%s", (int(supplier_id),))
            return cur.rowcount > 0

    def find_by_document(self, *, cnpj: Optional[str] = None, cpf: Optional[str] = None) -> Optional[Supplier]:
        clauses: list[str] = []
        params: list[object] = []
        if cnpj:
            clauses.append("cnpj=%s")
            params.append(cnpj)
        if cpf:
            clauses.append("cpf=%s")
            params.append(cpf)
        if not clauses:
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT * FROM suppliers WHERE {' OR '.join(clauses)} LIMIT 1", tuple(params))
            r = fetchone(cur)
            return _row_to_supplier(r) if r else None

    def list(
        self,
        *,
        condominium_id: int,
        category: Optional[SupplierCategory] = None,
        status: Optional[SupplierStatus] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Supplier]:
        clauses = ["condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if category is not None:
            clauses.append("category=%s")
            params.append(category.value)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if search:
            clauses.append(
                "(company_name LIKE %s OR trade_name LIKE %s OR contact_name LIKE %s OR email LIKE %s OR cnpj LIKE %s)"
            )
            like = f"%{search}%"
            params.extend([like] * 5)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM suppliers
                WHERE {' AND '.join(clauses)}
                ORDER BY company_name, id
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_supplier(r) for r in fetchall(cur)]
