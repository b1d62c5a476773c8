from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import time

from ..common.datetime_utils import format_minutes, minutes_since_midnight, parse_clock_time
from ..core.enums import AttendanceStatus, Disposition

_MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TimeWindowPolicy:
    """Classifies a time of day against the check-in window.

    Boundaries are minutes since midnight in school time:
    earliest <= t < late_threshold is on time, late_threshold <= t <= latest
    is late, anything outside is too early or too late.
    """

    earliest: int
    late_threshold: int
    latest: int

    def __post_init__(self):
        for name in ("earliest", "late_threshold", "latest"):
            value = getattr(self, name)
            if not 0 <= value < _MINUTES_PER_DAY:
                raise ValueError(f"{name} must be within a day, got {value}")
        if not self.earliest <= self.late_threshold <= self.latest:
            raise ValueError("Check-in window must satisfy earliest <= late_threshold <= latest")

    @classmethod
    def from_config(cls, window: dict) -> "TimeWindowPolicy":
        """Build from {"earliest": "HH:MM", "late": "HH:MM", "latest": "HH:MM"}."""

        def _minutes(key: str) -> int:
            t = parse_clock_time(str(window[key]))
            return t.hour * 60 + t.minute

        return cls(earliest=_minutes("earliest"), late_threshold=_minutes("late"), latest=_minutes("latest"))

    def classify(self, time_of_day: time) -> Disposition:
        t = minutes_since_midnight(time_of_day)
        if t < self.earliest:
            return Disposition.TOO_EARLY
        if t > self.latest:
            return Disposition.TOO_LATE
        if t < self.late_threshold:
            return Disposition.ON_TIME
        return Disposition.LATE

    def status_for(self, disposition: Disposition) -> AttendanceStatus:
        if disposition == Disposition.ON_TIME:
            return AttendanceStatus.PRESENT
        if disposition == Disposition.LATE:
            return AttendanceStatus.LATE
        raise ValueError(f"{disposition.value} does not produce an attendance record")

    def minutes_until_open(self, time_of_day: time) -> int:
        return max(0, math.ceil(self.earliest - minutes_since_midnight(time_of_day)))

    def is_closed(self, time_of_day: time) -> bool:
        """True once no further check-in can be accepted today (absence is final)."""

        # Scans are truncated to whole seconds, so 09:00:00.5 still counts as 09:00:00.
        return minutes_since_midnight(time_of_day.replace(microsecond=0)) > self.latest

    def describe(self) -> dict:
        return {
            "earliest": format_minutes(self.earliest),
            "late": format_minutes(self.late_threshold),
            "latest": format_minutes(self.latest),
        }
