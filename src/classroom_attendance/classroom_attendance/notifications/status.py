from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import whole_minutes
from ..core.constants import DEFAULT_ATTENDANCE_WINDOW_MINUTES, DEFAULT_STARTING_SOON_MINUTES
from ..core.enums import NotificationStatus


@dataclass(frozen=True)
class ClassTiming:
    """Minute figures of one class relative to "now"."""

    minutes_until_start: int
    minutes_from_start: int
    has_started: bool
    has_ended: bool
    in_window: bool

    @classmethod
    def compute(
        cls,
        *,
        now: datetime,
        starts_at: datetime,
        ends_at: datetime,
        window_minutes: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    ) -> "ClassTiming":
        minutes_from_start = whole_minutes(now - starts_at)
        return cls(
            minutes_until_start=whole_minutes(starts_at - now),
            minutes_from_start=minutes_from_start,
            has_started=now >= starts_at,
            has_ended=now > ends_at,
            in_window=0 <= minutes_from_start <= window_minutes,
        )


def derive_status(
    timing: ClassTiming,
    *,
    already_marked: bool,
    soon_minutes: int = DEFAULT_STARTING_SOON_MINUTES,
) -> NotificationStatus:
    """Map class timing and attendance state to a display status.

    Rules are checked in order and the first match wins: marked, ended,
    inside the attendance window, about to start, later today.
    """
    if already_marked:
        return NotificationStatus.MARKED
    if timing.has_ended:
        return NotificationStatus.EXPIRED
    if timing.in_window:
        return NotificationStatus.ACTIVE
    if not timing.has_started and timing.minutes_until_start <= soon_minutes:
        return NotificationStatus.STARTING_SOON
    if timing.minutes_until_start > soon_minutes:
        return NotificationStatus.UPCOMING
    return NotificationStatus.EXPIRED


def minutes_remaining(
    timing: ClassTiming,
    status: NotificationStatus,
    *,
    window_minutes: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES,
) -> int:
    if status != NotificationStatus.ACTIVE:
        return 0
    return max(0, window_minutes - timing.minutes_from_start)
