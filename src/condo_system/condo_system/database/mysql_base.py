from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def placeholders(values: Sequence[Any]) -> str:
    """`%s,%s,...` for an IN (...) clause."""
    return ",".join(["%s"] * len(values))


def build_update(columns: Iterable[str]) -> str:
    return ", ".join(f"{c}=%s" for c in columns)


def split_update(fields: Dict[str, Any], allowed: Iterable[str]) -> Tuple[List[str], List[Any]]:
    """Keep only whitelisted columns of a partial update payload."""
    cols: List[str] = []
    params: List[Any] = []
    for col in allowed:
        if col in fields:
            cols.append(col)
            value = fields[col]
            params.append(value.value if isinstance(value, Enum) else value)
    return cols, params


def as_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_bool(value: Any) -> bool:
    return bool(int(value)) if value is not None else False


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values.

    mysql-connector returns TIME columns as `timedelta`; the pure-Python
    connector and some fixtures hand back `time` or `'HH:MM:SS'` strings.
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
