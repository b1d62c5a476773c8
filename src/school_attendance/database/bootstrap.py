"""Schema bootstrap and one-time migrations.

These run from scripts/ or from create_app (AUTO_INIT_DB), never per request.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import time
from pathlib import Path
from typing import Any, Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


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
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", target.describe())


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def parse_legacy_classes(raw: Any) -> list[str]:
    """Read a class list stored either as a JSON array or as 'A, B, C'.

    Only the catalog migration uses this; the runtime repository accepts JSON only.
    """

    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, list):
        values = raw
    else:
        text = str(raw or "").strip()
        try:
            values = json.loads(text)
        except ValueError:
            values = text.split(",")
        if isinstance(values, str):
            values = values.split(",")
        if not isinstance(values, list):
            raise ValueError(f"Unsupported class list: {raw!r}")

    classes = [str(v).strip() for v in values if str(v).strip()]
    if not classes:
        raise ValueError(f"Empty class list: {raw!r}")
    return classes


def normalize_catalog_classes(db_config: dict) -> int:
    """Rewrite every forms.classes value as a JSON array. Returns rows changed."""

    conn = _connect(DBConfig.from_dict(db_config))
    changed = 0
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT form, CAST(classes AS CHAR) AS classes FROM forms")
        for row in cur.fetchall():
            normalized = json.dumps(parse_legacy_classes(row["classes"]))
            if normalized != row["classes"]:
                cur.execute("UPDATE forms SET classes=%s WHERE form=%s", (normalized, row["form"]))
                changed += 1
        conn.commit()
    finally:
        conn.close()
    logger.info("Catalog classes normalized (rows changed=%d)", changed)
    return changed


def _column_exists(cur, table: str, column: str) -> bool:
    cur.execute(f"SHOW COLUMNS FROM `{table}` LIKE %s", (column,))
    return bool(cur.fetchall())


def rename_legacy_attendance_date(db_config: dict) -> bool:
    """Rename the old server's attendance.`date` column. Returns True when renamed."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        if not _column_exists(cur, "attendance", "date"):
            return False
        cur.execute("ALTER TABLE attendance CHANGE `date` attendance_date DATE NOT NULL")
        conn.commit()
    finally:
        conn.close()
    logger.info("attendance.date renamed to attendance_date")
    return True


def require_attendance_time_in(db_config: dict) -> int:
    """Drop rows without a check-in time, then make time_in NOT NULL. Returns rows deleted."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("DELETE FROM attendance WHERE time_in IS NULL")
        deleted = int(cur.rowcount or 0)
        cur.execute("ALTER TABLE attendance MODIFY time_in TIME NOT NULL")
        conn.commit()
    finally:
        conn.close()
    logger.info("Attendance rows without time_in removed: %d", deleted)
    return deleted


def backfill_late_status(db_config: dict, late_threshold: time) -> int:
    """Mark old check-ins at or after the late threshold as late. Returns rows changed.

    The old server stored every check-in as 'present'.
    """

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute(
            "UPDATE attendance SET status='late' WHERE status='present' AND time_in >= %s",
            (late_threshold.strftime("%H:%M:%S"),),
        )
        changed = int(cur.rowcount or 0)
        conn.commit()
    finally:
        conn.close()
    logger.info("Attendance rows backfilled as late: %d", changed)
    return changed


def ensure_forms_unique_form(db_config: dict) -> bool:
    """Give the old id-keyed forms table one row per form. Returns True when the key was added.

    Keeps the lowest id of each duplicated form.
    """

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        # Current schema: form is the primary key.
        if not _column_exists(cur, "forms", "id"):
            return False
        cur.execute("SHOW INDEX FROM forms WHERE Key_name = 'uq_forms_form'")
        if cur.fetchall():
            return False
        cur.execute(
            """
            DELETE f1 FROM forms f1
            INNER JOIN forms f2
                ON f1.form = f2.form
               AND f1.id > f2.id
            """
        )
        cur.execute("ALTER TABLE forms ADD UNIQUE KEY uq_forms_form (form)")
        conn.commit()
    finally:
        conn.close()
    logger.info("Unique key uq_forms_form added")
    return True


def cleanup_duplicate_attendance(db_config: dict) -> int:
    """Keep only the first attendance row per (student, date). Returns rows deleted.

    Must run before the unique key can be added to a database created without it.
    """

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute(
            """
            DELETE a1 FROM attendance a1
            INNER JOIN attendance a2
                ON a1.student_id = a2.student_id
               AND a1.attendance_date = a2.attendance_date
               AND a1.id > a2.id
            """
        )
        deleted = int(cur.rowcount or 0)
        conn.commit()
    finally:
        conn.close()
    logger.info("Duplicate attendance rows removed: %d", deleted)
    return deleted


def ensure_attendance_unique_key(db_config: dict) -> bool:
    """Add uq_attendance_student_date if missing. Returns True when it was added."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW INDEX FROM attendance WHERE Key_name = 'uq_attendance_student_date'")
        if cur.fetchall():
            return False
        cur.execute("ALTER TABLE attendance ADD UNIQUE KEY uq_attendance_student_date (student_id, attendance_date)")
        conn.commit()
    finally:
        conn.close()
    logger.info("Unique key uq_attendance_student_date added")
    return True
