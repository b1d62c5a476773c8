from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=str(r["student_id"]),
        attendance_date=r["attendance_date"],
        time_in=normalize_mysql_time(r["time_in"]),
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, attendance_date, time_in, status
                FROM attendance
                WHERE student_id=%s AND attendance_date=%s
                """,
                (student_id, attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert_checkin(self, *, student_id: str, attendance_date: date, time_in: time, status: AttendanceStatus) -> None:
        # uq_attendance_student_date turns a concurrent duplicate into DuplicateRecordError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, attendance_date, time_in, status)
                VALUES(%s,%s,%s,%s)
                """,
                (student_id, attendance_date, time_in.replace(microsecond=0), status.value),
            )

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, attendance_date, time_in, status
                FROM attendance
                WHERE attendance_date=%s
                ORDER BY time_in
                """,
                (attendance_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_student(self, student_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def delete_for_student(self, student_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE student_id=%s", (student_id,))
            return int(cur.rowcount or 0)
