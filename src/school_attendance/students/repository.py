from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Roster storage.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_student_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_barcode(self, barcode: str) -> Optional[Student]:
        raise NotImplementedError

    def list_filtered(self, *, form: Optional[int] = None, class_name: Optional[str] = None) -> Sequence[Student]:
        """Students matching the filters, ordered by name."""

        raise NotImplementedError

    def count_in_class(self, *, form: int, class_name: str) -> int:
        raise NotImplementedError

    def create(self, student: Student) -> None:
        raise NotImplementedError

    def update(self, *, student_id: str, name: str, form: int, class_name: str) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError
