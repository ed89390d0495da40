from __future__ import annotations

from datetime import date
from decimal import Decimal

import mysql.connector
import pytest

from src.condo_system.condo_system.billing.mysql_unit_billing_repository import MySQLUnitBillingRepository
from src.condo_system.condo_system.core.enums import BillingStatus
from src.condo_system.condo_system.core.exceptions import ConflictError


class _Cursor:
    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = 0

    def execute(self, sql, params=()):
        self._conn.statements.append((sql, params))
        if len(self._conn.statements) == self._conn.fail_on:
            raise mysql.connector.IntegrityError(msg="Duplicate entry for key 'uq_unit_billings_fee_unit'", errno=1062)
        self.lastrowid = len(self._conn.statements)

    def close(self):
        pass


class _Connection:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.statements = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return _Cursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class _ConnFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def _row(unit_id):
    return {
        "monthly_fee_id": 1,
        "unit_id": unit_id,
        "ideal_fraction": Decimal("0.5"),
        "base_amount": Decimal("500.00"),
        "total_amount": Decimal("500.00"),
        "due_date": date(2025, 3, 20),
        "status": BillingStatus.PENDING,
    }


def test_create_many_inserts_in_one_transaction():
    conn = _Connection()
    ids = MySQLUnitBillingRepository(_ConnFactory(conn)).create_many(rows=[_row(1), _row(2)])
    assert ids == [1, 2]
    assert conn.committed
    assert all(sql.startswith("INSERT INTO unit_billings(") for sql, _ in conn.statements)


def test_duplicate_key_becomes_conflict_and_rolls_back():
    conn = _Connection(fail_on=2)
    repo = MySQLUnitBillingRepository(_ConnFactory(conn))
    with pytest.raises(ConflictError) as exc:
        repo.create_many(rows=[_row(1), _row(2)])
    assert exc.value.conflicts == [{"unit_id": 2}]
    assert conn.rolled_back
    assert not conn.committed
