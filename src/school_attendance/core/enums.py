from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database and shown in reports.

    ABSENT is never stored: it is derived from the lack of a record.
    """

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class Disposition(str, Enum):
    """Where a time of day falls relative to the check-in window."""

    TOO_EARLY = "too_early"
    ON_TIME = "on_time"
    LATE = "late"
    TOO_LATE = "too_late"


class LedgerResult(str, Enum):
    ACCEPTED = "accepted"
    ALREADY_RECORDED = "already_recorded"


class ScanOutcomeKind(str, Enum):
    """Every possible result of a barcode scan. Callers must handle all of them."""

    ACCEPTED = "accepted"
    NOT_FOUND = "not_found"
    EARLY_WINDOW = "early_window"
    WINDOW_CLOSED = "window_closed"
    DUPLICATE_CHECK_IN = "duplicate_check_in"
