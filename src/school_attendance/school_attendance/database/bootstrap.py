from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_TEACHER = {
    "name": "Demo Teacher",
    "email": "teacher@example.com",
    "mobile_number": "0000000001",
    "password": "teacher123",
}
DEMO_STUDENT = {
    "name": "Demo Student",
    "email": "student@example.com",
    "mobile_number": "0000000002",
    "registration_number": "REG-0001",
    "password": "student123",
}


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_sql_file(db_config: dict, path: str | Path) -> int:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    count = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_sql_file(db_config, schema_path)
    logger.info("Applied %s schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_sql_file(db_config, seed_path)
    logger.info("Applied %s seed statements from %s", count, seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh the demo teacher and student accounts."""
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(*, name: str, email: str, mobile_number: str, password: str, role: str) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, mobile_number=%s, password_hash=%s, role=%s
                    WHERE id=%s
                    """,
                    (name, mobile_number, password_hash, role, existing["id"]),
                )
                return int(existing["id"])
            cur.execute(
                """
                INSERT INTO users (name, email, mobile_number, password_hash, role)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (name, email, mobile_number, password_hash, role),
            )
            return int(cur.lastrowid)

        teacher_id = upsert_user(
            name=DEMO_TEACHER["name"],
            email=DEMO_TEACHER["email"],
            mobile_number=DEMO_TEACHER["mobile_number"],
            password=DEMO_TEACHER["password"],
            role="teacher",
        )
        cur.execute("INSERT IGNORE INTO teachers (user_id) VALUES (%s)", (teacher_id,))

        student_id = upsert_user(
            name=DEMO_STUDENT["name"],
            email=DEMO_STUDENT["email"],
            mobile_number=DEMO_STUDENT["mobile_number"],
            password=DEMO_STUDENT["password"],
            role="student",
        )
        cur.execute(
            "INSERT IGNORE INTO students (user_id, registration_number) VALUES (%s, %s)",
            (student_id, DEMO_STUDENT["registration_number"]),
        )

        conn.commit()
        logger.info("Demo accounts ready (teacher=%s, student=%s)", teacher_id, student_id)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
