from __future__ import annotations

from datetime import time

import pytest

from school_attendance.database import bootstrap
from school_attendance.database.bootstrap import (
    SCHEMA_PATH,
    _strip_comments,
    _strip_create_db_and_use,
    iter_sql_statements,
    parse_legacy_classes,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('["Science", "Arts"]', ["Science", "Arts"]),
        ("Science, Arts", ["Science", "Arts"]),
        (b'["Advance","Brilliant"]', ["Advance", "Brilliant"]),
        (["Advance", " Honest "], ["Advance", "Honest"]),
        ('"Science,Arts"', ["Science", "Arts"]),
    ],
)
def test_parse_legacy_classes(raw, expected):
    assert parse_legacy_classes(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "[]", "42", '{"a": 1}'])
def test_parse_legacy_classes_rejects_unusable_values(raw):
    with pytest.raises(ValueError):
        parse_legacy_classes(raw)


def test_iter_sql_statements_respects_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;y\";\n\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'SELECT "x;y"',
        "SELECT 1",
    ]


def test_schema_file_defines_unique_checkin_key():
    sql = _strip_comments(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    attendance = next(s for s in statements if "TABLE IF NOT EXISTS attendance" in s)
    assert "uq_attendance_student_date" in attendance
    assert any("TABLE IF NOT EXISTS forms" in s for s in statements)
    assert any("TABLE IF NOT EXISTS students" in s for s in statements)


class RecordingCursor:
    """Records executed SQL; SHOW queries answer from `rows_for` by prefix."""

    def __init__(self, rows_for=None, rowcount=0):
        self.rows_for = rows_for or {}
        self.rowcount = rowcount
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchall(self):
        last = self.executed[-1][0]
        return next((rows for prefix, rows in self.rows_for.items() if last.startswith(prefix)), [])

    def statements(self):
        return [sql for sql, _ in self.executed]


class RecordingConnection:
    def __init__(self, cursor: RecordingCursor):
        self._cursor = cursor
        self.committed = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def close(self):
        self.closed = True


@pytest.fixture
def fake_db(monkeypatch):
    def _install(**cursor_kwargs):
        cur = RecordingCursor(**cursor_kwargs)
        conn = RecordingConnection(cur)
        monkeypatch.setattr(bootstrap, "_connect", lambda *a, **k: conn)
        return cur, conn

    return _install


DB = {"database": "attendance_smc"}


def test_rename_legacy_date_column(fake_db):
    cur, conn = fake_db(rows_for={"SHOW COLUMNS FROM `attendance` LIKE": [("date", "date", "NO", "", None, "")]})

    assert bootstrap.rename_legacy_attendance_date(DB) is True

    assert cur.executed[0] == ("SHOW COLUMNS FROM `attendance` LIKE %s", ("date",))
    assert cur.statements()[1] == "ALTER TABLE attendance CHANGE `date` attendance_date DATE NOT NULL"
    assert conn.committed and conn.closed


def test_rename_is_skipped_on_current_schema(fake_db):
    cur, conn = fake_db()

    assert bootstrap.rename_legacy_attendance_date(DB) is False

    assert not any(s.startswith("ALTER") for s in cur.statements())
    assert conn.closed


def test_backfill_late_uses_threshold(fake_db):
    cur, _ = fake_db(rowcount=4)

    assert bootstrap.backfill_late_status(DB, time(7, 30)) == 4

    sql, params = cur.executed[0]
    assert sql == "UPDATE attendance SET status='late' WHERE status='present' AND time_in >= %s"
    assert params == ("07:30:00",)


def test_require_time_in_deletes_then_alters(fake_db):
    cur, _ = fake_db(rowcount=2)

    assert bootstrap.require_attendance_time_in(DB) == 2

    assert cur.statements() == [
        "DELETE FROM attendance WHERE time_in IS NULL",
        "ALTER TABLE attendance MODIFY time_in TIME NOT NULL",
    ]


def test_duplicate_cleanup_keeps_first_row_per_day(fake_db):
    cur, _ = fake_db(rowcount=1)

    assert bootstrap.cleanup_duplicate_attendance(DB) == 1

    sql = cur.statements()[0]
    assert "a1.attendance_date = a2.attendance_date" in sql
    assert "a1.id > a2.id" in sql


def test_forms_unique_key_on_legacy_table(fake_db):
    cur, _ = fake_db(rows_for={"SHOW COLUMNS FROM `forms` LIKE": [("id",)]})

    assert bootstrap.ensure_forms_unique_form(DB) is True

    statements = cur.statements()
    assert statements[2].startswith("DELETE f1 FROM forms f1")
    assert "f1.id > f2.id" in statements[2]
    assert statements[3] == "ALTER TABLE forms ADD UNIQUE KEY uq_forms_form (form)"


def test_forms_unique_key_skipped_without_id_column(fake_db):
    cur, _ = fake_db()

    assert bootstrap.ensure_forms_unique_form(DB) is False
    assert len(cur.statements()) == 1
