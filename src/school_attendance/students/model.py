from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import BARCODE_PREFIX


def barcode_for(student_id: str) -> str:
    return f"{BARCODE_PREFIX}{student_id}"


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student.

    Plain data; the barcode is always derived from student_id.
    """

    student_id: str
    name: str
    form: int
    class_name: str
    barcode: str

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "form": self.form,
            "class": self.class_name,
            "barcode": self.barcode,
        }
