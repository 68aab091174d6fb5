from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

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


def fetch_count(cur, key: str = "count") -> int:
    row = fetchone(cur)
    if not row:
        return 0
    return int(row.get(key) or 0)


def is_duplicate_entry(err: Exception) -> bool:
    """True when a write failed on a UNIQUE/PRIMARY KEY constraint."""
    return isinstance(err, mysql_errors.IntegrityError) and getattr(err, "errno", None) == errorcode.ER_DUP_ENTRY
