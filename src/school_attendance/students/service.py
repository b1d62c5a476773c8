from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence

from ..attendance.ledger import AttendanceLedger
from ..catalog.service import CatalogService
from ..common.validators import require_int, require_non_empty
from ..core.constants import CLASS_LETTERS, UNKNOWN_CLASS_LETTER
from ..core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from .model import Student, barcode_for
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def generate_student_id(*, year: int, form: int, class_name: str, sequence: int) -> str:
    """YYYY + 2-digit form + class letter + 3-digit sequence, e.g. 202601A007."""

    letter = CLASS_LETTERS.get(class_name, UNKNOWN_CLASS_LETTER)
    return f"{year}{form:02d}{letter}{sequence:03d}"


class StudentService:
    """Use case: enroll, edit and remove students (the roster)."""

    def __init__(
        self,
        students: StudentRepository,
        catalog: CatalogService,
        ledger: AttendanceLedger,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._students = students
        self._catalog = catalog
        self._ledger = ledger
        self._today = today

    def _validate_placement(self, form, class_name) -> tuple[int, str]:
        form = require_int(form, "Form")
        class_name = require_non_empty(class_name, "Class")
        self._catalog.catalog.validate(form, class_name)
        return form, class_name

    def _next_student_id(self, form: int, class_name: str) -> str:
        year = self._today().year
        sequence = self._students.count_in_class(form=form, class_name=class_name) + 1
        # Counting breaks after deletions; skip ids that are already taken.
        while True:
            candidate = generate_student_id(year=year, form=form, class_name=class_name, sequence=sequence)
            if not self._students.get_by_student_id(candidate):
                return candidate
            sequence += 1

    def enroll(self, *, name: str, form, class_name: str, student_id: Optional[str] = None) -> Student:
        name = require_non_empty(name, "Name")
        form, class_name = self._validate_placement(form, class_name)

        student_id = (student_id or "").strip() or self._next_student_id(form, class_name)
        if self._students.get_by_student_id(student_id):
            raise ValidationError("Student ID or barcode already exists")

        student = Student(
            student_id=student_id,
            name=name,
            form=form,
            class_name=class_name,
            barcode=barcode_for(student_id),
        )
        try:
            self._students.create(student)
        except DuplicateRecordError:
            raise ValidationError("Student ID or barcode already exists")

        logger.info("Enrolled %s (%s) in form %d %s", student.student_id, student.name, form, class_name)
        return student

    def update(self, *, student_id: str, name: str, form, class_name: str) -> Student:
        existing = self.get(student_id)
        name = require_non_empty(name, "Name")
        form, class_name = self._validate_placement(form, class_name)

        self._students.update(student_id=existing.student_id, name=name, form=form, class_name=class_name)
        return Student(
            student_id=existing.student_id,
            name=name,
            form=form,
            class_name=class_name,
            barcode=existing.barcode,
        )

    def get(self, student_id: str) -> Student:
        student = self._students.get_by_student_id(require_non_empty(student_id, "Student ID"))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def list_students(self, *, form: Optional[int] = None, class_name: Optional[str] = None) -> Sequence[Student]:
        return self._students.list_filtered(form=form, class_name=class_name)

    def clear_attendance(self, student_id: str) -> int:
        student = self.get(student_id)
        return self._ledger.delete_for_student(student.student_id)

    def delete(self, student_id: str, *, cascade: bool = False) -> int:
        """Remove a student. Returns the number of attendance records removed with it."""

        student = self.get(student_id)
        removed = 0
        if self._ledger.has_history(student.student_id):
            if not cascade:
                raise ValidationError(
                    "Cannot delete student with attendance records. "
                    "Use cascade=true to delete attendance records as well."
                )
            removed = self._ledger.delete_for_student(student.student_id)

        if not self._students.delete(student.student_id):
            raise NotFoundError("Student not found")

        logger.info("Deleted student %s (attendance removed=%d)", student.student_id, removed)
        return removed
