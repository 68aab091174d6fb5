from __future__ import annotations

from typing import Optional, Sequence, Set

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_entry
from ..users.model import StudentProfile
from ..users.mysql_user_repository import to_student_profile
from .repository import EnrollmentRepository

_STUDENT_COLUMNS = "u.id, u.name, u.email, u.mobile_number, st.registration_number"


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, student_id: int, subject_id: int) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO subject_enrollments(student_id, subject_id) VALUES(%s,%s)",
                    (int(student_id), int(subject_id)),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_entry(e):
                return None
            raise

    def delete(self, *, student_id: int, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM subject_enrollments WHERE student_id=%s AND subject_id=%s",
                (int(student_id), int(subject_id)),
            )
            return cur.rowcount > 0

    def delete_for_stream(self, *, student_id: int, stream_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE se FROM subject_enrollments se
                JOIN subjects sub ON sub.id = se.subject_id
                WHERE se.student_id=%s AND sub.stream_id=%s
                """,
                (int(student_id), int(stream_id)),
            )
            return int(cur.rowcount)

    def exists(self, *, student_id: int, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM subject_enrollments WHERE student_id=%s AND subject_id=%s",
                (int(student_id), int(subject_id)),
            )
            return fetchone(cur) is not None

    def subject_ids_in_stream(self, *, student_id: int, stream_id: int) -> Set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT se.subject_id
                FROM subject_enrollments se
                JOIN subjects sub ON sub.id = se.subject_id
                WHERE se.student_id=%s AND sub.stream_id=%s
                """,
                (int(student_id), int(stream_id)),
            )
            return {int(r["subject_id"]) for r in fetchall(cur)}

    def _list_students(self, sql: str, params: tuple) -> Sequence[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [to_student_profile(r) for r in fetchall(cur)]

    def list_students_in_stream(self, stream_id: int) -> Sequence[StudentProfile]:
        return self._list_students(
            f"""
            SELECT DISTINCT {_STUDENT_COLUMNS}
            FROM users u
            JOIN students st ON st.user_id = u.id
            JOIN subject_enrollments se ON se.student_id = u.id
            JOIN subjects sub ON sub.id = se.subject_id
            WHERE sub.stream_id=%s
            ORDER BY u.name ASC
            """,
            (int(stream_id),),
        )

    def list_students_in_subject(self, subject_id: int) -> Sequence[StudentProfile]:
        return self._list_students(
            f"""
            SELECT {_STUDENT_COLUMNS}
            FROM users u
            JOIN students st ON st.user_id = u.id
            JOIN subject_enrollments se ON se.student_id = u.id
            WHERE se.subject_id=%s
            ORDER BY u.name ASC
            """,
            (int(subject_id),),
        )

    def list_available_for_stream(self, stream_id: int) -> Sequence[StudentProfile]:
        return self._list_students(
            f"""
            SELECT {_STUDENT_COLUMNS}
            FROM users u
            JOIN students st ON st.user_id = u.id
            WHERE u.id NOT IN (
                SELECT se.student_id
                FROM subject_enrollments se
                JOIN subjects sub ON sub.id = se.subject_id
                WHERE sub.stream_id=%s
            )
            ORDER BY u.name ASC
            """,
            (int(stream_id),),
        )

    def list_available_for_subject(self, subject_id: int) -> Sequence[StudentProfile]:
        return self._list_students(
            f"""
            SELECT {_STUDENT_COLUMNS}
            FROM users u
            JOIN students st ON st.user_id = u.id
            WHERE u.id NOT IN (SELECT student_id FROM subject_enrollments WHERE subject_id=%s)
            ORDER BY u.name ASC
            """,
            (int(subject_id),),
        )
