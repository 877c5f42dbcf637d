from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


class ReferenceClock:
    """Current time in the reference timezone.

    Every schedule comparison goes through one instance of this class so the
    whole request sees the same zone. Tests swap in a fixed clock.
    """

    def __init__(self, tz_name: str):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def at(self, day: date, clock_time: time) -> datetime:
        """Instant of ``clock_time`` on ``day`` in the reference zone."""
        return datetime.combine(day, clock_time, tzinfo=self.tz)

    def localize(self, instant: datetime) -> datetime:
        return instant.astimezone(self.tz)


def whole_minutes(delta: timedelta) -> int:
    """Minutes in ``delta``, truncated toward zero."""
    return int(delta.total_seconds() / 60)


def ceil_minutes(delta: timedelta) -> int:
    return math.ceil(delta.total_seconds() / 60)


def floor_minutes(delta: timedelta) -> int:
    return math.floor(delta.total_seconds() / 60)


def to_utc_naive(instant: datetime) -> datetime:
    """Aware instant -> naive UTC, the form stored in DATETIME columns."""
    return instant.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


def to_iso_utc(instant: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2026-10-18T03:30:00.000Z."""
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
