from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, name, form, class, barcode"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["student_id"]),
        name=r["name"],
        form=int(r["form"]),
        class_name=r["class"],
        barcode=r["barcode"],
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_student_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_barcode(self, barcode: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE barcode=%s", (barcode,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def list_filtered(self, *, form: Optional[int] = None, class_name: Optional[str] = None) -> Sequence[Student]:
        clauses: list[str] = []
        params: list[object] = []

        if form is not None:
            clauses.append("form=%s")
            params.append(int(form))
        if class_name:
            clauses.append("class=%s")
            params.append(class_name)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students {where} ORDER BY name, student_id",
                tuple(params),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def count_in_class(self, *, form: int, class_name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM students WHERE form=%s AND class=%s",
                (int(form), class_name),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(self, student: Student) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(student_id, name, form, class, barcode)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (student.student_id, student.name, student.form, student.class_name, student.barcode),
            )

    def update(self, *, student_id: str, name: str, form: int, class_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET name=%s, form=%s, class=%s WHERE student_id=%s",
                (name, int(form), class_name, student_id),
            )
            return cur.rowcount > 0

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0
