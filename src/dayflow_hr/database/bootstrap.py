from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection
from .mysql_base import new_id

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
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


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> int:
    """Create missing tables; returns the number of statements executed."""
    ensure_database_exists(conn_factory)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    executed = 0
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("Schema applied to %s (%d statements)", conn_factory.config.database, executed)
    return executed


DEMO_PASSWORD = "password123"

_DEMO_ACCOUNTS = (
    ("admin@dayflow.com", "ADMIN", "Admin", "User", "Management", "System Administrator"),
    ("john.doe@dayflow.com", "EMPLOYEE", "John", "Doe", "Engineering", "Software Engineer"),
    ("jane.smith@dayflow.com", "EMPLOYEE", "Jane", "Smith", "Human Resources", "HR Specialist"),
)


def ensure_demo_users(conn_factory: DatabaseConnection, *, password: str = DEMO_PASSWORD) -> int:
    """Upsert the demo accounts with their employee profiles."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(password)

        for email, role, first_name, last_name, department, designation in _DEMO_ACCOUNTS:
            cur.execute("SELECT id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                user_id = existing["id"]
                cur.execute(
                    "UPDATE users SET password_hash=%s, role=%s, is_active=1 WHERE id=%s",
                    (password_hash, role, user_id),
                )
            else:
                user_id = new_id()
                cur.execute(
                    "INSERT INTO users (id, email, password_hash, role) VALUES (%s, %s, %s, %s)",
                    (user_id, email, password_hash, role),
                )

            cur.execute("SELECT id FROM employees WHERE user_id=%s", (user_id,))
            if not cur.fetchone():
                cur.execute(
                    """
                    INSERT INTO employees (id, user_id, first_name, last_name, department, designation)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (new_id(), user_id, first_name, last_name, department, designation),
                )

        conn.commit()
    finally:
        conn.close()

    logger.info("Demo accounts ready (%d)", len(_DEMO_ACCOUNTS))
    return len(_DEMO_ACCOUNTS)
