from __future__ import annotations

from datetime import datetime, time, timezone

import pytest

from school_attendance.core.enums import AttendanceStatus, ScanOutcomeKind
from school_attendance.core.exceptions import ValidationError


@pytest.fixture
def alice(enroll):
    return enroll("S001", "Alice")


def test_on_time_scan_records_present(container, alice, scan_at):
    outcome = scan_at(alice.barcode, 7, 10)

    assert outcome.kind == ScanOutcomeKind.ACCEPTED
    assert outcome.accepted
    assert outcome.status == AttendanceStatus.PRESENT
    assert outcome.time_in == time(7, 10)
    assert outcome.message == "Alice checked in at 07:10:00"
    rec = container.ledger.record_for("S001", outcome.attendance_date)
    assert rec.status == AttendanceStatus.PRESENT


def test_late_scan_records_late(alice, scan_at):
    outcome = scan_at(alice.barcode, 7, 45)

    assert outcome.kind == ScanOutcomeKind.ACCEPTED
    assert outcome.status == AttendanceStatus.LATE
    assert outcome.message.endswith("(late)")


def test_second_scan_same_day_is_duplicate(container, alice, scan_at):
    scan_at(alice.barcode, 7, 10)

    outcome = scan_at(alice.barcode, 7, 45)

    assert outcome.kind == ScanOutcomeKind.DUPLICATE_CHECK_IN
    assert not outcome.accepted
    assert outcome.time_in == time(7, 10)
    assert outcome.status == AttendanceStatus.PRESENT
    assert "07:10:00" in outcome.message
    assert len(container.attendance_repo.all()) == 1


def test_scan_before_window_opens(container, alice, scan_at):
    outcome = scan_at(alice.barcode, 4, 50)

    assert outcome.kind == ScanOutcomeKind.EARLY_WINDOW
    assert outcome.status is None
    assert "10 more minute(s)" in outcome.message
    assert "05:00" in outcome.message
    assert container.attendance_repo.all() == []


def test_scan_after_window_closes(container, alice, scan_at):
    outcome = scan_at(alice.barcode, 9, 0, 30)

    assert outcome.kind == ScanOutcomeKind.WINDOW_CLOSED
    assert "marked absent" in outcome.message
    assert container.attendance_repo.all() == []


def test_scan_exactly_at_latest_is_still_late(alice, scan_at):
    outcome = scan_at(alice.barcode, 9, 0)

    assert outcome.kind == ScanOutcomeKind.ACCEPTED
    assert outcome.status == AttendanceStatus.LATE


def test_unknown_barcode(container, scan_at):
    outcome = scan_at("SMKNOPE", 7, 0)

    assert outcome.kind == ScanOutcomeKind.NOT_FOUND
    assert outcome.student is None
    assert outcome.message == "No student found for barcode SMKNOPE"
    assert container.attendance_repo.all() == []


def test_blank_barcode_is_a_validation_error(container):
    with pytest.raises(ValidationError):
        container.scan_service.resolve_scan("   ")


def test_observed_time_in_other_timezone_is_converted(container, alice):
    # 23:20 UTC on Feb 1 is 07:20 on Feb 2 in Kuala Lumpur.
    observed = datetime(2026, 2, 1, 23, 20, tzinfo=timezone.utc)

    outcome = container.scan_service.resolve_scan(alice.barcode, observed)

    assert outcome.kind == ScanOutcomeKind.ACCEPTED
    assert outcome.attendance_date.isoformat() == "2026-02-02"
    assert outcome.time_in == time(7, 20)
    assert outcome.status == AttendanceStatus.PRESENT


def test_scan_without_observed_time_uses_clock(container, clock, alice):
    clock.set(7, 35, 12)

    outcome = container.scan_service.resolve_scan(alice.barcode)

    assert outcome.time_in == time(7, 35, 12)
    assert outcome.status == AttendanceStatus.LATE


def test_outcome_to_dict(alice, scan_at):
    d = scan_at(alice.barcode, 7, 10).to_dict()

    assert d["success"] is True
    assert d["kind"] == "accepted"
    assert d["student"]["student_id"] == "S001"
    assert d["time"] == "07:10:00"
    assert d["status"] == "present"
    assert d["date"] == "2026-02-02"


def test_rescan_after_close_reports_existing_check_in(container, alice, scan_at):
    scan_at(alice.barcode, 7, 0)

    outcome = scan_at(alice.barcode, 9, 30)

    assert outcome.kind == ScanOutcomeKind.WINDOW_CLOSED
    assert "already checked in today at 07:00:00" in outcome.message
    assert "absent" not in outcome.message
    assert outcome.time_in == time(7, 0)
    assert outcome.status == AttendanceStatus.PRESENT
    rows = container.report_service.attendance_for_date(outcome.attendance_date)
    assert rows[0]["status"] == "present"
