from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, LedgerResult
from ..core.exceptions import DuplicateRecordError
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """One record per student per day; a recorded check-in is never changed."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def try_record_check_in(
        self,
        student_id: str,
        attendance_date: date,
        time_in: time,
        status: AttendanceStatus,
    ) -> LedgerResult:
        if status not in (AttendanceStatus.PRESENT, AttendanceStatus.LATE):
            raise ValueError(f"Cannot record status {status.value!r}")

        if self._attendance.get_for_student_and_date(student_id, attendance_date) is not None:
            return LedgerResult.ALREADY_RECORDED

        try:
            self._attendance.insert_checkin(student_id=student_id, attendance_date=attendance_date, time_in=time_in, status=status)
        except DuplicateRecordError:
            # Lost a race with another kiosk between the read and the insert.
            logger.info("Concurrent check-in for %s on %s rejected by unique key", student_id, attendance_date)
            return LedgerResult.ALREADY_RECORDED

        return LedgerResult.ACCEPTED

    def record_for(self, student_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_student_and_date(student_id, attendance_date)

    def records_for_date(self, attendance_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(attendance_date)

    def has_history(self, student_id: str) -> bool:
        return self._attendance.count_for_student(student_id) > 0

    def delete_for_student(self, student_id: str) -> int:
        deleted = self._attendance.delete_for_student(student_id)
        logger.info("Deleted %d attendance record(s) for %s", deleted, student_id)
        return deleted
