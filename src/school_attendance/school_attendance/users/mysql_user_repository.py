from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_entry
from .model import StudentProfile, User
from .repository import UserRepository

_USER_COLUMNS = """
    u.id, u.name, u.email, u.password_hash, u.role, u.mobile_number,
    st.registration_number, u.created_at, u.updated_at
"""


def _to_user(row: dict) -> User:
    return User(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        mobile_number=row.get("mobile_number"),
        registration_number=row.get("registration_number"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def to_student_profile(row: dict) -> StudentProfile:
    return StudentProfile(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        registration_number=row["registration_number"],
        mobile_number=row.get("mobile_number"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_USER_COLUMNS}
                FROM users u
                LEFT JOIN students st ON st.user_id = u.id
                WHERE {where}
                """,
                (value,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("u.id=%s", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("u.email=%s", email)

    def get_by_registration_number(self, registration_number: str) -> Optional[User]:
        return self._get_one("st.registration_number=%s", registration_number)

    def _create(
        self,
        *,
        role: Role,
        name: str,
        email: str,
        mobile_number: str,
        password_hash: str,
        profile_sql: str,
        profile_params: tuple,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, mobile_number, password_hash, role)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (name, email, mobile_number, password_hash, role.value),
                )
                user_id = int(cur.lastrowid)
                cur.execute(profile_sql, (user_id, *profile_params))
                return user_id
        except Exception as e:
            # Lost a race against a concurrent registration.
            if is_duplicate_entry(e):
                raise ConflictError("Email or registration number already exists")
            raise

    def create_student(
        self,
        *,
        name: str,
        email: str,
        mobile_number: str,
        registration_number: str,
        password_hash: str,
    ) -> int:
        return self._create(
            role=Role.STUDENT,
            name=name,
            email=email,
            mobile_number=mobile_number,
            password_hash=password_hash,
            profile_sql="INSERT INTO students(user_id, registration_number) VALUES(%s,%s)",
            profile_params=(registration_number,),
        )

    def create_teacher(self, *, name: str, email: str, mobile_number: str, password_hash: str) -> int:
        return self._create(
            role=Role.TEACHER,
            name=name,
            email=email,
            mobile_number=mobile_number,
            password_hash=password_hash,
            profile_sql="INSERT INTO teachers(user_id) VALUES(%s)",
            profile_params=(),
        )

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_students(self) -> Sequence[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.id, u.name, u.email, u.mobile_number, st.registration_number
                FROM users u
                JOIN students st ON st.user_id = u.id
                ORDER BY u.name ASC
                """
            )
            return [to_student_profile(r) for r in fetchall(cur)]
