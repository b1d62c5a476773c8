from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import SchoolClock, format_minutes
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, Disposition, LedgerResult, ScanOutcomeKind
from ..students.model import Student
from ..students.repository import StudentRepository
from .ledger import AttendanceLedger
from .policy import TimeWindowPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one barcode scan. Rejections are outcomes, not exceptions."""

    kind: ScanOutcomeKind
    message: str
    student: Optional[Student] = None
    time_in: Optional[time] = None
    status: Optional[AttendanceStatus] = None
    attendance_date: Optional[date] = None

    @property
    def accepted(self) -> bool:
        return self.kind == ScanOutcomeKind.ACCEPTED

    def to_dict(self) -> dict:
        return {
            "success": self.accepted,
            "kind": self.kind.value,
            "message": self.message,
            "student": self.student.to_dict() if self.student else None,
            "time": self.time_in.strftime("%H:%M:%S") if self.time_in else None,
            "status": self.status.value if self.status else None,
            "date": self.attendance_date.strftime("%Y-%m-%d") if self.attendance_date else None,
        }


class ScanService:
    """Use case: turn a barcode scan into a check-in.

    This is the only code path that creates attendance records.
    """

    def __init__(
        self,
        students: StudentRepository,
        ledger: AttendanceLedger,
        policy: TimeWindowPolicy,
        clock: SchoolClock,
    ):
        self._students = students
        self._ledger = ledger
        self._policy = policy
        self._clock = clock

    def resolve_scan(self, barcode: str, observed_at: Optional[datetime] = None) -> ScanOutcome:
        """Resolve a scan at observed_at (the kiosk's clock), or now if not given."""

        barcode = require_non_empty(barcode, "Barcode")
        observed = self._clock.to_local(observed_at) if observed_at else self._clock.now()
        attendance_date = observed.date()
        time_in = observed.time().replace(microsecond=0)

        student = self._students.get_by_barcode(barcode)
        if not student:
            logger.info("Scan rejected: unknown barcode %s", barcode)
            return ScanOutcome(
                kind=ScanOutcomeKind.NOT_FOUND,
                message=f"No student found for barcode {barcode}",
                time_in=time_in,
                attendance_date=attendance_date,
            )

        disposition = self._policy.classify(time_in)

        if disposition == Disposition.TOO_EARLY:
            wait = self._policy.minutes_until_open(time_in)
            return self._rejected(
                ScanOutcomeKind.EARLY_WINDOW,
                f"Check-in opens at {format_minutes(self._policy.earliest)}. "
                f"{student.name}, please wait {wait} more minute(s).",
                student,
                time_in,
                attendance_date,
            )

        if disposition == Disposition.TOO_LATE:
            closed_at = format_minutes(self._policy.latest)
            existing = self._ledger.record_for(student.student_id, attendance_date)
            if existing:
                return self._rejected(
                    ScanOutcomeKind.WINDOW_CLOSED,
                    f"Check-in closed at {closed_at}. "
                    f"{student.name} already checked in today at {existing.time_in.strftime('%H:%M:%S')}.",
                    student,
                    existing.time_in,
                    attendance_date,
                    status=existing.status,
                )
            return self._rejected(
                ScanOutcomeKind.WINDOW_CLOSED,
                f"Check-in closed at {closed_at}. {student.name} is marked absent for today.",
                student,
                time_in,
                attendance_date,
            )

        status = self._policy.status_for(disposition)
        result = self._ledger.try_record_check_in(student.student_id, attendance_date, time_in, status)

        if result == LedgerResult.ALREADY_RECORDED:
            existing = self._ledger.record_for(student.student_id, attendance_date)
            at = f" at {existing.time_in.strftime('%H:%M:%S')}" if existing else ""
            return self._rejected(
                ScanOutcomeKind.DUPLICATE_CHECK_IN,
                f"{student.name} already checked in today{at}. Only one check-in per day is recorded.",
                student,
                existing.time_in if existing else time_in,
                attendance_date,
                status=existing.status if existing else None,
            )

        suffix = " (late)" if status == AttendanceStatus.LATE else ""
        logger.info("Check-in accepted: %s %s %s", student.student_id, time_in, status.value)
        return ScanOutcome(
            kind=ScanOutcomeKind.ACCEPTED,
            message=f"{student.name} checked in at {time_in.strftime('%H:%M:%S')}{suffix}",
            student=student,
            time_in=time_in,
            status=status,
            attendance_date=attendance_date,
        )

    def _rejected(
        self,
        kind: ScanOutcomeKind,
        message: str,
        student: Student,
        time_in: time,
        attendance_date: date,
        *,
        status: Optional[AttendanceStatus] = None,
    ) -> ScanOutcome:
        logger.info("Scan rejected (%s): %s at %s", kind.value, student.student_id, time_in)
        return ScanOutcome(kind=kind, message=message, student=student, time_in=time_in, status=status, attendance_date=attendance_date)
