from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_PAID_LEAVE_DAYS, DEFAULT_SICK_LEAVE_DAYS, DEFAULT_UNPAID_LEAVE_DAYS
from ..core.enums import LeaveType, Role
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal splitter (handles ';' inside quotes).
    buf: list[str] = []
    quote: str | None = None

    for ch in sql:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
            continue

        if ch in ("'", '"'):
            quote = ch
            buf.append(ch)
            continue

        if ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connection(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def ensure_database_exists(db_config: dict) -> None:
    factory = _connection(db_config)
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(_strip_comments(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_accounts(db_config: dict) -> None:
    """Upsert one verified admin and one verified employee with default leave balances."""

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(full_name: str, email: str, password: str, role: Role, code: str) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE employees
                    SET full_name=%s, password_hash=%s, role=%s, is_verified=1, employee_code=%s
                    WHERE employee_id=%s
                    """,
                    (full_name, password_hash, role.value, code, int(existing["employee_id"])),
                )
                return int(existing["employee_id"])

            cur.execute(
                """
                INSERT INTO employees (employee_code, full_name, email, password_hash, role, is_verified, joining_date)
                VALUES (%s, %s, %s, %s, %s, 1, CURDATE())
                """,
                (code, full_name, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

        admin_id = upsert("Admin Demo", "admin@dayflow.local", "Admin1234", Role.ADMIN, "EMP0001")
        employee_id = upsert("Employee Demo", "employee@dayflow.local", "Employee1234", Role.EMPLOYEE, "EMP0002")

        defaults = {
            LeaveType.PAID: DEFAULT_PAID_LEAVE_DAYS,
            LeaveType.SICK: DEFAULT_SICK_LEAVE_DAYS,
            LeaveType.UNPAID: DEFAULT_UNPAID_LEAVE_DAYS,
        }
        for emp_id in (admin_id, employee_id):
            for leave_type, days in defaults.items():
                cur.execute(
                    "INSERT IGNORE INTO leave_balances (employee_id, leave_type, days) VALUES (%s, %s, %s)",
                    (emp_id, leave_type.value, days),
                )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo accounts ready")


def list_tables(db_config: dict) -> list[str]:
    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
