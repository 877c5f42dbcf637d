from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from ..classes.model import ClassLocation, ScheduledClass
from ..classes.repository import ClassLocationRepository, ScheduledClassRepository
from ..common.datetime_utils import ReferenceClock, ceil_minutes, floor_minutes, to_iso_utc
from ..common.geo import Coordinates, haversine_distance
from ..core.constants import DEFAULT_ATTENDANCE_WINDOW_MINUTES
from ..core.enums import AttendanceStatus, Entity
from ..core.exceptions import (
    AlreadyMarkedError,
    BeaconMismatchError,
    CodeMismatchError,
    MisconfiguredError,
    NotFoundError,
    OutOfRangeError,
    TooEarlyError,
    WindowExpiredError,
)
from ..students.repository import StudentRepository
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceSubmission:
    roll_number: str
    class_name: str
    class_code: str
    latitude: float
    longitude: float
    beacon_id: Optional[str] = None


@dataclass(frozen=True)
class AttendanceReceipt:
    attendance_id: int
    class_name: str
    subject: str
    date: str
    marked_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "className": self.class_name,
            "subject": self.subject,
            "date": self.date,
            "time": to_iso_utc(self.marked_at),
        }


def normalize_beacon_id(value: Optional[str]) -> Optional[str]:
    """Trim and lower-case a beacon identifier; blank becomes None."""
    if value is None:
        return None
    value = str(value).strip().lower()
    return value or None


class AttendanceService:
    """Use case: validate a submission and mark the student present.

    Gates run in a fixed order and the first failure aborts the request
    before anything is written:

    1. student exists
    2. scheduled class exists for the class code
    3. location config exists for the class name
    4. coordinates inside the geofence
    5. beacon configured and matching
    6. class code matches the stored code
    7. now inside [start, start + window]
    8. no record yet for this student, class, subject and day
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ScheduledClassRepository,
        locations: ClassLocationRepository,
        *,
        clock: ReferenceClock,
        window_minutes: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._locations = locations
        self._clock = clock
        self._window_minutes = int(window_minutes)

    def submit(self, submission: AttendanceSubmission) -> AttendanceReceipt:
        now = self._clock.now()
        today = now.date()

        student = self._students.get_by_roll_number(submission.roll_number)
        if not student:
            logger.warning("Student not found: %s", submission.roll_number)
            raise NotFoundError(Entity.STUDENT)

        scheduled = self._classes.get_by_code(submission.class_code)
        if not scheduled:
            logger.warning("No class for code %r (roll=%s)", submission.class_code, submission.roll_number)
            raise NotFoundError(Entity.CLASS)

        location = self._locations.get_by_class_name(submission.class_name)
        if not location:
            logger.warning("No location config for class %r", submission.class_name)
            raise NotFoundError(Entity.LOCATION)

        self._check_geofence(submission, location)
        self._check_beacon(submission, location)

        if submission.class_code != scheduled.class_code:
            logger.warning("Class code mismatch for %s", submission.roll_number)
            raise CodeMismatchError(expected=scheduled.class_code)

        self._check_window(scheduled, now)

        attendance_id = self._attendance.create_if_absent(
            roll_number=submission.roll_number,
            class_name=scheduled.class_name,
            subject=scheduled.subject,
            class_code=scheduled.class_code,
            status=AttendanceStatus.PRESENT,
            marked_at=now,
            attendance_date=today,
        )
        if attendance_id is None:
            logger.warning(
                "Attendance already marked: %s %s/%s on %s",
                submission.roll_number,
                scheduled.class_name,
                scheduled.subject,
                today,
            )
            raise AlreadyMarkedError()

        logger.info(
            "Attendance marked: %s %s/%s (id=%s)",
            submission.roll_number,
            scheduled.class_name,
            scheduled.subject,
            attendance_id,
        )
        return AttendanceReceipt(
            attendance_id=attendance_id,
            class_name=scheduled.class_name,
            subject=scheduled.subject,
            date=today.strftime("%Y-%m-%d"),
            marked_at=now,
        )

    def _check_geofence(self, submission: AttendanceSubmission, location: ClassLocation) -> None:
        distance = haversine_distance(
            Coordinates(submission.latitude, submission.longitude),
            Coordinates(location.latitude, location.longitude),
        )
        if distance > location.radius:
            logger.warning(
                "Outside geofence: %s is %.1fm from %s (allowed %sm)",
                submission.roll_number,
                distance,
                location.class_name,
                location.radius,
            )
            raise OutOfRangeError(distance=distance, allowed_radius=location.radius)

    def _check_beacon(self, submission: AttendanceSubmission, location: ClassLocation) -> None:
        expected = normalize_beacon_id(location.beacon_id)
        received = normalize_beacon_id(submission.beacon_id)

        if not expected:
            logger.error("No beacon configured for class %s", location.class_name)
            raise MisconfiguredError("beacon")

        if received != expected:
            logger.warning("Beacon mismatch for %s: got %r", submission.roll_number, submission.beacon_id)
            raise BeaconMismatchError(expected=location.beacon_id, received=submission.beacon_id)

    def _check_window(self, scheduled: ScheduledClass, now: datetime) -> None:
        starts_at = self._clock.at(now.date(), scheduled.start_time)
        window_end = starts_at + timedelta(minutes=self._window_minutes)

        if now < starts_at:
            minutes_until_start = ceil_minutes(starts_at - now)
            logger.warning("Too early for %s: starts in %d min", scheduled.class_code, minutes_until_start)
            raise TooEarlyError(minutes_until_start=minutes_until_start)

        if now > window_end:
            minutes_late = floor_minutes(now - starts_at) - self._window_minutes
            logger.warning("Window expired for %s: %d min late", scheduled.class_code, minutes_late)
            raise WindowExpiredError(minutes_late=minutes_late)
