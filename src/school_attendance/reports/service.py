from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..attendance.ledger import AttendanceLedger
from ..attendance.model import AttendanceRecord
from ..attendance.policy import TimeWindowPolicy
from ..catalog.service import CatalogService
from ..common.datetime_utils import SchoolClock
from ..common.validators import optional_str
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository

REPORT_FIELDS = ["student_id", "name", "form", "class", "time_in", "status"]


def _row(student: Student, record: Optional[AttendanceRecord]) -> dict:
    return {
        "student_id": student.student_id,
        "name": student.name,
        "form": student.form,
        "class": student.class_name,
        "time_in": record.time_in.strftime("%H:%M:%S") if record else None,
        "status": record.status.value if record else AttendanceStatus.ABSENT.value,
    }


class ReportService:
    """Derived present/late/absent views for one date.

    Every view walks the same filtered roster (ordered by name) and joins it
    against that date's ledger, so reports and exports always agree.
    Absence means "no record"; it is only reported once the day's check-in
    window has closed.
    """

    def __init__(
        self,
        students: StudentRepository,
        ledger: AttendanceLedger,
        catalog: CatalogService,
        policy: TimeWindowPolicy,
        clock: SchoolClock,
    ):
        self._students = students
        self._ledger = ledger
        self._catalog = catalog
        self._policy = policy
        self._clock = clock

    def _roster(self, form: Optional[int], class_name: Optional[str]) -> Sequence[Student]:
        class_name = optional_str(class_name)
        catalog = self._catalog.catalog
        if form is not None:
            catalog.get(form)
            if class_name:
                catalog.validate(form, class_name)
        elif class_name and not catalog.has_class(class_name):
            raise ValidationError(f"Invalid class {class_name!r}")

        students = self._students.list_filtered(form=form, class_name=class_name)
        return sorted(students, key=lambda s: (s.name, s.student_id))

    def _records_by_student(self, attendance_date: date) -> dict[str, AttendanceRecord]:
        return {r.student_id: r for r in self._ledger.records_for_date(attendance_date)}

    def absence_is_final(self, attendance_date: date) -> bool:
        now = self._clock.now()
        if attendance_date > now.date():
            return False
        if attendance_date == now.date():
            return self._policy.is_closed(now.time())
        return True

    def attendance_for_date(self, attendance_date: date, *, form: Optional[int] = None, class_name: Optional[str] = None) -> list[dict]:
        records = self._records_by_student(attendance_date)
        return [_row(s, records.get(s.student_id)) for s in self._roster(form, class_name)]

    def absent_for_date(self, attendance_date: date, *, form: Optional[int] = None, class_name: Optional[str] = None) -> list[dict]:
        roster = self._roster(form, class_name)
        if not self.absence_is_final(attendance_date):
            return []
        records = self._records_by_student(attendance_date)
        return [_row(s, None) for s in roster if s.student_id not in records]

    def late_for_date(self, attendance_date: date, *, form: Optional[int] = None, class_name: Optional[str] = None) -> list[dict]:
        records = self._records_by_student(attendance_date)
        out = []
        for s in self._roster(form, class_name):
            r = records.get(s.student_id)
            if r and r.status == AttendanceStatus.LATE:
                out.append(_row(s, r))
        return out

    def absent_or_late_for_date(
        self,
        attendance_date: date,
        *,
        form: Optional[int] = None,
        class_name: Optional[str] = None,
    ) -> list[dict]:
        rows = self.attendance_for_date(attendance_date, form=form, class_name=class_name)
        include_absent = self.absence_is_final(attendance_date)
        return [
            r
            for r in rows
            if r["status"] == AttendanceStatus.LATE.value
            or (include_absent and r["status"] == AttendanceStatus.ABSENT.value)
        ]

    def daily_stats(self, attendance_date: Optional[date] = None) -> dict:
        attendance_date = attendance_date or self._clock.today()
        rows = self.attendance_for_date(attendance_date)

        counts = {s.value: 0 for s in AttendanceStatus}
        for r in rows:
            counts[r["status"]] += 1

        final = self.absence_is_final(attendance_date)
        return {
            "date": attendance_date.strftime("%Y-%m-%d"),
            "total_students": len(rows),
            "checked_in": counts[AttendanceStatus.PRESENT.value] + counts[AttendanceStatus.LATE.value],
            "present": counts[AttendanceStatus.PRESENT.value],
            "late": counts[AttendanceStatus.LATE.value],
            "absent": counts[AttendanceStatus.ABSENT.value] if final else 0,
            "absence_final": final,
            "window": self._policy.describe(),
        }
