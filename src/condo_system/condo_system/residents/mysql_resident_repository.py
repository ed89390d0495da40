from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PersonStatus, UnitStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, build_update, db_cursor, fetchall, fetchone, placeholders, split_update
from .model import Resident
from .repository import ResidentRepository

COLUMNS = (
    "condominium_id",
    "unit_id",
    "unit_status",
    "owner_name",
    "owner_email",
    "owner_phone",
    "owner_cpf",
    "owner_status",
    "owner_notes",
    "has_tenant",
    "tenant_name",
    "tenant_email",
    "tenant_phone",
    "tenant_cpf",
    "tenant_status",
    "lease_start",
    "lease_end",
    "tenant_notes",
    "total_residents",
    "notes",
    "active",
)


def _row_to_resident(r: dict) -> Resident:
    return Resident(
        id=int(r["id"]),
        condominium_id=int(r["condominium_id"]),
        unit_id=int(r["unit_id"]),
        unit_status=UnitStatus(r["unit_status"]),
        owner_name=r["owner_name"],
        owner_email=r.get("owner_email"),
        owner_phone=r.get("owner_phone"),
        owner_cpf=r.get("owner_cpf"),
        owner_status=PersonStatus(r["owner_status"]),
        owner_notes=r.get("owner_notes"),
        has_tenant=as_bool(r.get("has_tenant")),
        tenant_name=r.get("tenant_name"),
        tenant_email=r.get("tenant_email"),
        tenant_phone=r.get("tenant_phone"),
        tenant_cpf=r.get("tenant_cpf"),
        tenant_status=PersonStatus(r.get("tenant_status") or PersonStatus.INACTIVE.value),
        lease_start=r.get("lease_start"),
        lease_end=r.get("lease_end"),
        tenant_notes=r.get("tenant_notes"),
        total_residents=int(r.get("total_residents") or 1),
        notes=r.get("notes"),
        active=as_bool(r.get("active")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLResidentRepository(ResidentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, data: dict) -> int:
        cols, params = split_update(data, COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO residents({', '.join(cols)}) VALUES({placeholders(cols)})", tuple(params))
            return int(cur.lastrowid)

    def get(self, *, resident_id: int) -> Optional[Resident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM residents WHERE id=%s", (int(resident_id),))
            r = fetchone(cur)
            return _row_to_resident(r) if r else None

    def update(self, *, resident_id: int, data: dict) -> bool:
        cols, params = split_update(data, COLUMNS)
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE residents SET {build_update(cols)} WHERE id=%s",
                tuple(params) + (int(resident_id),),
            )
            return cur.rowcount >= 0

    def delete(self, *, resident_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM residents WHERE id=%s", (int(resident_id),))
            return cur.rowcount > 0

    def find_active_for_unit(self, *, unit_id: int) -> Optional[Resident]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM residents WHERE unit_id=%s AND active=1 ORDER BY id LIMIT 1",
                (int(unit_id),),
            )
            r = fetchone(cur)
            return _row_to_resident(r) if r else None

    def list_by_condominium(
        self,
        *,
        condominium_id: int,
        search: Optional[str] = None,
        with_tenant: Optional[bool] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Resident]:
        clauses = ["r.condominium_id=%s"]
        params: list[object] = [int(condominium_id)]
        if with_tenant is not None:
            clauses.append("r.has_tenant=%s")
            params.append(1 if with_tenant else 0)
        if search:
            clauses.append(
                "(r.owner_name LIKE %s OR r.owner_email LIKE %s OR r.tenant_name LIKE %s "
                "OR r.tenant_email LIKE %s OR u.number LIKE %s)"
            )
            like = f"%{search}%"
            params.extend([like] * 5)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.* FROM residents r
                JOIN units u ON u.id = r.unit_id
                WHERE {' AND '.join(clauses)}
                ORDER BY r.created_at DESC, r.id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_resident(r) for r in fetchall(cur)]
