from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

import pytest

from school_attendance.attendance.model import AttendanceRecord
from school_attendance.attendance.policy import TimeWindowPolicy
from school_attendance.catalog.model import FormEntry
from school_attendance.common.datetime_utils import SchoolClock
from school_attendance.container import assemble
from school_attendance.core.enums import AttendanceStatus
from school_attendance.core.exceptions import DuplicateRecordError
from school_attendance.students.model import Student



class FixedClock(SchoolClock):
    def __init__(self, now: datetime, timezone: str = "Asia/Kuala_Lumpur"):
        super().__init__(timezone)
        self.current = self.to_local(now)

    def now(self) -> datetime:
        return self.current

    def set(self, hour: int, minute: int, second: int = 0) -> None:
        self.current = self.current.replace(hour=hour, minute=minute, second=second)


class InMemoryCatalog:
    def __init__(self):
        self._entries: dict[int, FormEntry] = {}

    def list_all(self):
        return [self._entries[k] for k in sorted(self._entries)]

    def insert(self, entry: FormEntry) -> None:
        if entry.form in self._entries:
            raise DuplicateRecordError(f"form {entry.form}")
        self._entries[entry.form] = entry


class InMemoryStudents:
    def __init__(self):
        self._by_id: dict[str, Student] = {}

    def get_by_student_id(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)

    def get_by_barcode(self, barcode: str) -> Optional[Student]:
        return next((s for s in self._by_id.values() if s.barcode == barcode), None)

    def list_filtered(self, *, form=None, class_name=None):
        items = [
            s
            for s in self._by_id.values()
            if (form is None or s.form == form) and (not class_name or s.class_name == class_name)
        ]
        return sorted(items, key=lambda s: (s.name, s.student_id))

    def count_in_class(self, *, form: int, class_name: str) -> int:
        return len(self.list_filtered(form=form, class_name=class_name))

    def create(self, student: Student) -> None:
        if student.student_id in self._by_id or self.get_by_barcode(student.barcode):
            raise DuplicateRecordError(student.student_id)
        self._by_id[student.student_id] = student

    def update(self, *, student_id: str, name: str, form: int, class_name: str) -> bool:
        s = self._by_id.get(student_id)
        if not s:
            return False
        self._by_id[student_id] = Student(
            student_id=s.student_id, name=name, form=form, class_name=class_name, barcode=s.barcode
        )
        return True

    def delete(self, student_id: str) -> bool:
        return self._by_id.pop(student_id, None) is not None


class InMemoryAttendance:
    """Ledger store with the same (student_id, attendance_date) unique key as MySQL."""

    def __init__(self):
        self._by_student_date: dict[tuple[str, date], AttendanceRecord] = {}
        self.inserts = 0
        # Simulates a concurrent scan: reads miss the row another kiosk just wrote.
        self.stale_reads = False

    def get_for_student_and_date(self, student_id: str, attendance_date: date) -> Optional[AttendanceRecord]:
        if self.stale_reads:
            return None
        return self._by_student_date.get((student_id, attendance_date))

    def insert_checkin(self, *, student_id: str, attendance_date: date, time_in: time, status: AttendanceStatus) -> None:
        key = (student_id, attendance_date)
        if key in self._by_student_date:
            raise DuplicateRecordError(f"Duplicate entry '{student_id}-{attendance_date}'")
        self.inserts += 1
        self._by_student_date[key] = AttendanceRecord(
            student_id=student_id, attendance_date=attendance_date, time_in=time_in, status=status
        )

    def list_for_date(self, attendance_date: date):
        items = [r for r in self._by_student_date.values() if r.attendance_date == attendance_date]
        return sorted(items, key=lambda r: r.time_in)

    def count_for_student(self, student_id: str) -> int:
        return sum(1 for r in self._by_student_date.values() if r.student_id == student_id)

    def delete_for_student(self, student_id: str) -> int:
        keys = [k for k in self._by_student_date if k[0] == student_id]
        for k in keys:
            del self._by_student_date[k]
        return len(keys)

    def all(self):
        return list(self._by_student_date.values())


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 2, 2, 7, 0, 0))


@pytest.fixture
def policy():
    return TimeWindowPolicy.from_config({"earliest": "05:00", "late": "07:30", "latest": "09:00"})


@pytest.fixture
def catalog_repo():
    return InMemoryCatalog()


@pytest.fixture
def students_repo():
    return InMemoryStudents()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def container(catalog_repo, students_repo, attendance_repo, policy, clock):
    c = assemble(
        catalog_repo=catalog_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        policy=policy,
        clock=clock,
    )
    c.catalog_service.seed_defaults()
    c.catalog_service.load()
    return c


@pytest.fixture
def enroll(container):
    def _enroll(student_id: str, name: str, form: int = 1, class_name: str = "Advance") -> Student:
        return container.student_service.enroll(name=name, form=form, class_name=class_name, student_id=student_id)

    return _enroll


@pytest.fixture
def scan_at(container, clock):
    """Scan a barcode at HH:MM[:SS] on the clock's current day."""

    def _scan(barcode: str, hour: int, minute: int, second: int = 0):
        observed = clock.at(time(hour, minute, second))
        return container.scan_service.resolve_scan(barcode, observed)

    return _scan
