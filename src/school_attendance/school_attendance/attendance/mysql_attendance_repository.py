from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Tuple

from ..common.datetime_utils import as_date
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall
from .model import AttendanceRecord, MarkEntry
from .repository import AttendanceRepository


def _subject_filter(
    subject_id: int,
    *,
    on_date: Optional[date],
    start: Optional[date],
    end: Optional[date],
) -> Tuple[str, list]:
    clauses = ["a.subject_id=%s"]
    params: list[object] = [int(subject_id)]
    if on_date is not None:
        clauses.append("a.date=%s")
        params.append(on_date)
    elif start is not None and end is not None:
        clauses.append("a.date BETWEEN %s AND %s")
        params.extend([start, end])
    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(
        self,
        student_id: int,
        *,
        subject_id: Optional[int] = None,
        stream_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.student_id=%s"]
        params: list[object] = [int(student_id)]
        if subject_id is not None:
            clauses.append("a.subject_id=%s")
            params.append(int(subject_id))
        if stream_id is not None:
            clauses.append("sub.stream_id=%s")
            params.append(int(stream_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.id, a.student_id, a.subject_id, a.date, a.status, a.created_at,
                       sub.name AS subject_name
                FROM attendance a
                JOIN subjects sub ON sub.id = a.subject_id
                WHERE {where}
                ORDER BY a.date DESC, a.id DESC
                """,
                tuple(params),
            )
            return [
                AttendanceRecord(
                    id=int(r["id"]),
                    student_id=int(r["student_id"]),
                    subject_id=int(r["subject_id"]),
                    date=as_date(r["date"]),
                    status=AttendanceStatus(r["status"]),
                    subject_name=r.get("subject_name"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def upsert_many(self, *, subject_id: int, on_date: date, entries: Sequence[MarkEntry]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            for entry in entries:
                cur.execute(
                    """
                    INSERT INTO attendance(student_id, subject_id, status, date)
                    VALUES(%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status)
                    """,
                    (int(entry.student_id), int(subject_id), entry.status.value, on_date),
                )
            return len(entries)

    def list_for_subject(
        self,
        subject_id: int,
        *,
        on_date: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[dict]:
        where, params = _subject_filter(subject_id, on_date=on_date, start=start, end=end)
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.id, a.student_id, u.name AS student_name, st.registration_number,
                       a.status, a.date
                FROM attendance a
                JOIN users u ON u.id = a.student_id
                JOIN students st ON st.user_id = a.student_id
                WHERE {where}
                ORDER BY a.date DESC, u.name ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [
                {
                    "id": int(r["id"]),
                    "student_id": int(r["student_id"]),
                    "student_name": r["student_name"],
                    "registration_number": r["registration_number"],
                    "status": r["status"],
                    "date": as_date(r["date"]).isoformat(),
                }
                for r in fetchall(cur)
            ]

    def count_for_subject(
        self,
        subject_id: int,
        *,
        on_date: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        where, params = _subject_filter(subject_id, on_date=on_date, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS count
                FROM attendance a
                JOIN students st ON st.user_id = a.student_id
                WHERE {where}
                """,
                tuple(params),
            )
            return fetch_count(cur)
