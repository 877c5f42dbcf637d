from __future__ import annotations

from dataclasses import dataclass

from .attendance.history import AttendanceHistoryService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassLocationRepository, MySQLScheduledClassRepository
from .common.datetime_utils import ReferenceClock
from .core.constants import (
    DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    DEFAULT_STARTING_SOON_MINUTES,
    DEFAULT_TIMEZONE,
)
from .database.connection import DatabaseConnection, DBConfig
from .notifications.service import NotificationService
from .students.mysql_student_repository import MySQLStudentRepository


@dataclass(frozen=True)
class Container:
    clock: ReferenceClock

    notification_service: NotificationService
    attendance_service: AttendanceService
    history_service: AttendanceHistoryService


def build_services(
    *,
    students,
    classes,
    locations,
    attendance,
    clock: ReferenceClock,
    window_minutes: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    soon_minutes: int = DEFAULT_STARTING_SOON_MINUTES,
) -> Container:
    """Wire services on top of any repository implementations."""
    return Container(
        clock=clock,
        notification_service=NotificationService(
            students,
            classes,
            attendance,
            clock=clock,
            window_minutes=window_minutes,
            soon_minutes=soon_minutes,
        ),
        attendance_service=AttendanceService(
            attendance,
            students,
            classes,
            locations,
            clock=clock,
            window_minutes=window_minutes,
        ),
        history_service=AttendanceHistoryService(attendance, students, clock=clock),
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    window_minutes: int = DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    soon_minutes: int = DEFAULT_STARTING_SOON_MINUTES,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return build_services(
        students=MySQLStudentRepository(conn),
        classes=MySQLScheduledClassRepository(conn),
        locations=MySQLClassLocationRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        clock=ReferenceClock(timezone),
        window_minutes=window_minutes,
        soon_minutes=soon_minutes,
    )
