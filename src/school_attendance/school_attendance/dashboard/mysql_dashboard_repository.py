from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Tuple

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .repository import DashboardRepository


def _date_range(column: str, start: Optional[date], end: Optional[date]) -> Tuple[str, tuple]:
    if start is None or end is None:
        return "", ()
    return f" AND DATE({column}) BETWEEN %s AND %s", (start, end)


class MySQLDashboardRepository(DashboardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def teacher_counts(self, teacher_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS count FROM streams WHERE teacher_id=%s", (int(teacher_id),))
            stream_count = fetch_count(cur)

            cur.execute(
                """
                SELECT COUNT(*) AS count
                FROM subjects sub
                JOIN streams st ON st.id = sub.stream_id
                WHERE st.teacher_id=%s
                """,
                (int(teacher_id),),
            )
            subject_count = fetch_count(cur)

            cur.execute(
                """
                SELECT COUNT(DISTINCT se.student_id) AS count
                FROM subject_enrollments se
                JOIN subjects sub ON sub.id = se.subject_id
                JOIN streams st ON st.id = sub.stream_id
                WHERE st.teacher_id=%s
                """,
                (int(teacher_id),),
            )
            student_count = fetch_count(cur)

        return {"streamCount": stream_count, "subjectCount": subject_count, "studentCount": student_count}

    def student_counts(self, student_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT sub.stream_id) AS count
                FROM subject_enrollments se
                JOIN subjects sub ON sub.id = se.subject_id
                WHERE se.student_id=%s
                """,
                (int(student_id),),
            )
            stream_count = fetch_count(cur)

            cur.execute("SELECT COUNT(*) AS count FROM subject_enrollments WHERE student_id=%s", (int(student_id),))
            subject_count = fetch_count(cur)

            cur.execute(
                """
                SELECT COUNT(*) AS total,
                       SUM(CASE WHEN status IN ('present', 'late') THEN 1 ELSE 0 END) AS attended
                FROM attendance
                WHERE student_id=%s
                """,
                (int(student_id),),
            )
            row = fetchone(cur) or {}

        return {
            "streamCount": stream_count,
            "subjectCount": subject_count,
            "total": int(row.get("total") or 0),
            "attended": int(row.get("attended") or 0),
        }

    def recent_attendance(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        extra, params = _date_range("a.date", start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.id, a.date, a.status, u.name AS student_name,
                       sub.name AS subject_name, sub.id AS subject_id
                FROM attendance a
                JOIN users u ON u.id = a.student_id
                JOIN subjects sub ON sub.id = a.subject_id
                JOIN streams st ON st.id = sub.stream_id
                WHERE st.teacher_id=%s{extra}
                ORDER BY a.created_at DESC
                LIMIT %s
                """,
                (int(teacher_id), *params, int(limit)),
            )
            return fetchall(cur)

    def recent_enrollments(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        extra, params = _date_range("se.created_at", start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT se.id, se.created_at, u.name AS student_name,
                       sub.name AS subject_name, sub.id AS subject_id
                FROM subject_enrollments se
                JOIN users u ON u.id = se.student_id
                JOIN subjects sub ON sub.id = se.subject_id
                JOIN streams st ON st.id = sub.stream_id
                WHERE st.teacher_id=%s{extra}
                ORDER BY se.created_at DESC
                LIMIT %s
                """,
                (int(teacher_id), *params, int(limit)),
            )
            return fetchall(cur)

    def recent_subjects(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        extra, params = _date_range("sub.created_at", start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sub.id, sub.name, sub.created_at, st.name AS stream_name, st.id AS stream_id
                FROM subjects sub
                JOIN streams st ON st.id = sub.stream_id
                WHERE st.teacher_id=%s{extra}
                ORDER BY sub.created_at DESC
                LIMIT %s
                """,
                (int(teacher_id), *params, int(limit)),
            )
            return fetchall(cur)

    def recent_streams(
        self, teacher_id: int, *, start: Optional[date], end: Optional[date], limit: int
    ) -> Sequence[dict]:
        extra, params = _date_range("created_at", start, end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, name, created_at
                FROM streams
                WHERE teacher_id=%s{extra}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(teacher_id), *params, int(limit)),
            )
            return fetchall(cur)
