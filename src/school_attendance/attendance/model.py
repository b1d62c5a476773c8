from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one accepted check-in for a student on a date."""

    student_id: str
    attendance_date: date
    time_in: time
    status: AttendanceStatus
