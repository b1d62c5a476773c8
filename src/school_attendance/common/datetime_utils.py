from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp. A trailing Z (JS toISOString) means UTC."""
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r} (expected ISO 8601)")


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time of day."""
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except (AttributeError, ValueError):
            continue
    raise ValidationError(f"Invalid time: {value!r} (expected HH:MM or HH:MM:SS)")


def minutes_since_midnight(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60 + value.microsecond / 60_000_000


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class SchoolClock:
    """Current date and time in the school's timezone.

    Note: Wrapped so services can take a fixed clock in tests.
    """

    def __init__(self, timezone: str):
        try:
            self._tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {timezone!r}")

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def today(self) -> date:
        return self.now().date()

    def to_local(self, value: datetime) -> datetime:
        """Convert an aware datetime to school time; naive values are taken as school time."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self._tz)
        return value.astimezone(self._tz)

    def at(self, time_of_day: time, *, on: Optional[date] = None) -> datetime:
        return datetime.combine(on or self.today(), time_of_day, tzinfo=self._tz)
