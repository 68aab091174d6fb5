from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import Stream
from .repository import StreamRepository


def _to_stream(row: dict) -> Stream:
    return Stream(
        id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        teacher_id=int(row["teacher_id"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLStreamRepository(StreamRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, stream_id: int) -> Optional[Stream]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, description, teacher_id, created_at, updated_at
                FROM streams
                WHERE id=%s
                """,
                (int(stream_id),),
            )
            row = fetchone(cur)
            return _to_stream(row) if row else None

    def create(self, *, name: str, description: Optional[str], teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO streams(name, description, teacher_id) VALUES(%s,%s,%s)",
                (name, description, int(teacher_id)),
            )
            return int(cur.lastrowid)

    def update(self, stream_id: int, *, name: str, description: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE streams SET name=%s, description=%s WHERE id=%s",
                (name, description, int(stream_id)),
            )
            return cur.rowcount > 0

    def delete(self, stream_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM streams WHERE id=%s", (int(stream_id),))
            return cur.rowcount > 0

    def count_subjects(self, stream_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS count FROM subjects WHERE stream_id=%s", (int(stream_id),))
            return fetch_count(cur)

    def count_students(self, stream_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT se.student_id) AS count
                FROM subject_enrollments se
                JOIN subjects sub ON sub.id = se.subject_id
                WHERE sub.stream_id=%s
                """,
                (int(stream_id),),
            )
            return fetch_count(cur)

    def list_for_teacher(self, teacher_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.description,
                       (SELECT COUNT(*) FROM subjects WHERE stream_id = s.id) AS subjectCount,
                       (SELECT COUNT(DISTINCT se.student_id)
                        FROM subject_enrollments se
                        JOIN subjects sub ON sub.id = se.subject_id
                        WHERE sub.stream_id = s.id) AS studentCount
                FROM streams s
                WHERE s.teacher_id=%s
                ORDER BY s.created_at DESC, s.id DESC
                """,
                (int(teacher_id),),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "description": r.get("description"),
                    "subjectCount": int(r.get("subjectCount") or 0),
                    "studentCount": int(r.get("studentCount") or 0),
                }
                for r in fetchall(cur)
            ]

    def list_for_student(self, student_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.description, t.name AS teacherName,
                       (SELECT COUNT(*) FROM subjects WHERE stream_id = s.id) AS subjectCount,
                       COUNT(se.id) AS enrolledSubjectCount
                FROM streams s
                JOIN users t ON t.id = s.teacher_id
                JOIN subjects sub ON sub.stream_id = s.id
                JOIN subject_enrollments se ON se.subject_id = sub.id
                WHERE se.student_id=%s
                GROUP BY s.id, s.name, s.description, t.name
                ORDER BY s.name ASC
                """,
                (int(student_id),),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "description": r.get("description"),
                    "teacherName": r["teacherName"],
                    "subjectCount": int(r.get("subjectCount") or 0),
                    "enrolledSubjectCount": int(r.get("enrolledSubjectCount") or 0),
                }
                for r in fetchall(cur)
            ]

    def get_with_teacher(self, stream_id: int) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.description, t.name AS teacherName
                FROM streams s
                JOIN users t ON t.id = s.teacher_id
                WHERE s.id=%s
                """,
                (int(stream_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return {
                "id": int(r["id"]),
                "name": r["name"],
                "description": r.get("description"),
                "teacherName": r["teacherName"],
            }
