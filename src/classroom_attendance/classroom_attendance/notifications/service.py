from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..attendance.repository import AttendanceRepository
from ..classes.model import ScheduledClass
from ..classes.repository import ScheduledClassRepository
from ..common.datetime_utils import ReferenceClock, to_iso_utc
from ..core.constants import DEFAULT_ATTENDANCE_WINDOW_MINUTES, DEFAULT_STARTING_SOON_MINUTES
from ..core.enums import Entity, NotificationStatus
from ..core.exceptions import NotFoundError
from ..students.repository import StudentRepository
from .status import ClassTiming, derive_status, minutes_remaining

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassNotification:
    class_name: str
    subject: str
    teacher_name: str
    date: str
    start_time: str
    end_time: str
    day: str
    status: NotificationStatus
    minutes_until_start: int
    minutes_remaining: int
    attendance_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "className": self.class_name,
            "subject": self.subject,
            "teacherName": self.teacher_name,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "day": self.day,
            "status": self.status.value,
            "minutesUntilStart": self.minutes_until_start,
            "minutesRemaining": self.minutes_remaining,
            "attendanceId": self.attendance_id,
        }


@dataclass(frozen=True)
class NotificationFeed:
    notifications: list[ClassNotification]
    server_time: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "notifications": [n.to_dict() for n in self.notifications],
            "serverTime": to_iso_utc(self.server_time),
        }


class NotificationService:
    """Use case: today's class notifications for a student."""

    def __init__(
        self,
        students: StudentRepository,
        classes: ScheduledClassRepository,
        attendance: AttendanceRepository,
        *,
        clock: ReferenceClock,
        window_minutes: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES,
        soon_minutes: int = DEFAULT_STARTING_SOON_MINUTES,
    ):
        self._students = students
        self._classes = classes
        self._attendance = attendance
        self._clock = clock
        self._window_minutes = int(window_minutes)
        self._soon_minutes = int(soon_minutes)

    def get_notifications(self, roll_number: str) -> NotificationFeed:
        now = self._clock.now()

        student = self._students.get_by_roll_number(roll_number)
        if not student:
            raise NotFoundError(Entity.STUDENT)

        classes = self._classes.list_for_cohort_on(
            year=student.year,
            branch=student.department,
            class_date=now.date(),
        )

        items = [self._build(roll_number, c, now) for c in classes]
        visible = [n for n in items if n.status != NotificationStatus.EXPIRED]
        logger.debug("Notifications for %s: %d of %d classes visible", roll_number, len(visible), len(items))
        return NotificationFeed(notifications=visible, server_time=now)

    def _build(self, roll_number: str, c: ScheduledClass, now: datetime) -> ClassNotification:
        timing = ClassTiming.compute(
            now=now,
            starts_at=self._clock.at(c.class_date, c.start_time),
            ends_at=self._clock.at(c.class_date, c.end_time),
            window_minutes=self._window_minutes,
        )
        existing = self._attendance.get_for_student_class_on(
            roll_number=roll_number,
            class_name=c.class_name,
            subject=c.subject,
            attendance_date=c.class_date,
        )
        status = derive_status(timing, already_marked=existing is not None, soon_minutes=self._soon_minutes)

        return ClassNotification(
            class_name=c.class_name,
            subject=c.subject,
            teacher_name=c.teacher_name,
            date=c.class_date.strftime("%Y-%m-%d"),
            start_time=c.start_time.strftime("%H:%M"),
            end_time=c.end_time.strftime("%H:%M"),
            day=c.day,
            status=status,
            minutes_until_start=max(0, timing.minutes_until_start),
            minutes_remaining=minutes_remaining(timing, status, window_minutes=self._window_minutes),
            attendance_id=existing.attendance_id if existing else None,
        )
