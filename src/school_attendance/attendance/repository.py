from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_student_and_date(self, student_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_checkin(self, *, student_id: str, attendance_date: date, time_in: time, status: AttendanceStatus) -> None:
        """Insert a record; raises DuplicateRecordError if (student_id, attendance_date) exists."""

        raise NotImplementedError

    def list_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_student(self, student_id: str) -> int:
        raise NotImplementedError

    def delete_for_student(self, student_id: str) -> int:
        raise NotImplementedError
