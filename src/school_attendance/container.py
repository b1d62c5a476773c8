from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.ledger import AttendanceLedger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import TimeWindowPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import ScanService
from .catalog.mysql_catalog_repository import MySQLCatalogRepository
from .catalog.repository import CatalogRepository
from .catalog.service import CatalogService
from .common.datetime_utils import SchoolClock
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    catalog_repo: CatalogRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    clock: SchoolClock
    policy: TimeWindowPolicy
    ledger: AttendanceLedger

    catalog_service: CatalogService
    student_service: StudentService
    scan_service: ScanService
    report_service: ReportService


def assemble(
    *,
    catalog_repo: CatalogRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    policy: TimeWindowPolicy,
    clock: SchoolClock,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""

    ledger = AttendanceLedger(attendance_repo)
    catalog_service = CatalogService(catalog_repo)

    return Container(
        conn=conn,
        catalog_repo=catalog_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        clock=clock,
        policy=policy,
        ledger=ledger,
        catalog_service=catalog_service,
        student_service=StudentService(students_repo, catalog_service, ledger, today=clock.today),
        scan_service=ScanService(students_repo, ledger, policy, clock),
        report_service=ReportService(students_repo, ledger, catalog_service, policy, clock),
    )


def build_container(*, db_config: dict, checkin_window: dict, timezone: str) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return assemble(
        catalog_repo=MySQLCatalogRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        policy=TimeWindowPolicy.from_config(checkin_window),
        clock=SchoolClock(timezone),
        conn=conn,
    )
