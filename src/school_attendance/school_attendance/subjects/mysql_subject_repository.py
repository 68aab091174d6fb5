from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository


def _to_subject(row: dict) -> Subject:
    return Subject(
        id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        stream_id=int(row["stream_id"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, description, stream_id, created_at, updated_at
                FROM subjects
                WHERE id=%s
                """,
                (int(subject_id),),
            )
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def list_for_stream(self, stream_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, description, stream_id, created_at, updated_at
                FROM subjects
                WHERE stream_id=%s
                ORDER BY name ASC
                """,
                (int(stream_id),),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def create(self, *, name: str, description: Optional[str], stream_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO subjects(name, description, stream_id) VALUES(%s,%s,%s)",
                (name, description, int(stream_id)),
            )
            return int(cur.lastrowid)

    def update(self, subject_id: int, *, name: str, description: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE subjects SET name=%s, description=%s WHERE id=%s",
                (name, description, int(subject_id)),
            )
            return cur.rowcount > 0

    def delete(self, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE id=%s", (int(subject_id),))
            return cur.rowcount > 0

    def count_students(self, subject_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS count FROM subject_enrollments WHERE subject_id=%s",
                (int(subject_id),),
            )
            return fetch_count(cur)

    def list_for_teacher(self, teacher_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.description, s.stream_id,
                       str.name AS streamName,
                       (SELECT COUNT(*) FROM subject_enrollments se WHERE se.subject_id = s.id) AS studentCount
                FROM subjects s
                JOIN streams str ON str.id = s.stream_id
                WHERE str.teacher_id=%s
                ORDER BY str.name ASC, s.name ASC
                """,
                (int(teacher_id),),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "description": r.get("description"),
                    "stream_id": int(r["stream_id"]),
                    "streamName": r["streamName"],
                    "studentCount": int(r.get("studentCount") or 0),
                }
                for r in fetchall(cur)
            ]

    def list_for_student(self, student_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.description,
                       str.id AS stream_id, str.name AS stream_name,
                       t.name AS teacher_name
                FROM subjects s
                JOIN subject_enrollments se ON se.subject_id = s.id
                JOIN streams str ON str.id = s.stream_id
                JOIN users t ON t.id = str.teacher_id
                WHERE se.student_id=%s
                ORDER BY str.name, s.name
                """,
                (int(student_id),),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "description": r.get("description"),
                    "stream_id": int(r["stream_id"]),
                    "stream_name": r["stream_name"],
                    "teacher_name": r["teacher_name"],
                }
                for r in fetchall(cur)
            ]

    def list_in_stream_for_student(self, *, student_id: int, stream_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.description, se.id AS enrollment_id
                FROM subjects s
                LEFT JOIN subject_enrollments se ON se.subject_id = s.id AND se.student_id=%s
                WHERE s.stream_id=%s
                ORDER BY s.name ASC
                """,
                (int(student_id), int(stream_id)),
            )
            return [
                {
                    "id": int(r["id"]),
                    "name": r["name"],
                    "description": r.get("description"),
                    "enrolled": r.get("enrollment_id") is not None,
                }
                for r in fetchall(cur)
            ]
