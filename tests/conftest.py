from __future__ import annotations

import threading
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceRecord
from src.classroom_attendance.classroom_attendance.classes.model import ClassLocation, ScheduledClass
from src.classroom_attendance.classroom_attendance.common.datetime_utils import ReferenceClock
from src.classroom_attendance.classroom_attendance.container import build_services
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus
from src.classroom_attendance.classroom_attendance.students.model import Student

TZ_NAME = "Asia/Kolkata"
IST = ZoneInfo(TZ_NAME)
TODAY = date(2026, 10, 18)

CLASSROOM = (17.3850, 78.4867)
BEACON_ID = "ABC123"


class FixedClock(ReferenceClock):
    """Reference clock frozen at a given local time; tests move it with ``set``."""

    def __init__(self, current: datetime):
        super().__init__(TZ_NAME)
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, hour: int, minute: int, second: int = 0, *, day: date = TODAY) -> datetime:
        self.current = datetime.combine(day, time(hour, minute, second), tzinfo=self.tz)
        return self.current


class InMemoryStudents:
    def __init__(self, students: list[Student]):
        self._by_roll = {s.roll_number: s for s in students}

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return self._by_roll.get(roll_number)


class InMemoryClasses:
    def __init__(self, classes: list[ScheduledClass]):
        self.classes = list(classes)

    def list_for_cohort_on(self, *, year: str, branch: str, class_date: date):
        items = [c for c in self.classes if c.year == year and c.branch == branch and c.class_date == class_date]
        return sorted(items, key=lambda c: c.start_time)

    def get_by_code(self, class_code: str) -> Optional[ScheduledClass]:
        return next((c for c in self.classes if c.class_code == class_code), None)


class InMemoryLocations:
    def __init__(self, locations: list[ClassLocation]):
        self.locations = list(locations)

    def get_by_class_name(self, class_name: str) -> Optional[ClassLocation]:
        return next((l for l in self.locations if l.class_name.lower() == class_name.lower()), None)


class InMemoryAttendance:
    """Mirrors the unique key on (roll_number, class_name, subject, attendance_date)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_key: dict[tuple[str, str, str, date], AttendanceRecord] = {}
        self._id = 0
        self.insert_attempts = 0

    @property
    def records(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())

    def get_for_student_class_on(self, *, roll_number, class_name, subject, attendance_date):
        return self._by_key.get((roll_number, class_name, subject, attendance_date))

    def create_if_absent(self, *, roll_number, class_name, subject, class_code, status, marked_at, attendance_date):
        key = (roll_number, class_name, subject, attendance_date)
        with self._lock:
            self.insert_attempts += 1
            if key in self._by_key:
                return None
            self._id += 1
            self._by_key[key] = AttendanceRecord(
                attendance_id=self._id,
                roll_number=roll_number,
                class_name=class_name,
                subject=subject,
                class_code=class_code,
                status=status,
                marked_at=marked_at,
                attendance_date=attendance_date,
            )
            return self._id

    def list_for_student(self, roll_number: str):
        return [r for r in self._by_key.values() if r.roll_number == roll_number]

    def add(self, *, roll_number, class_name, subject, marked_at: datetime) -> AttendanceRecord:
        """Test helper: store a record as if it had been marked at ``marked_at``."""
        self.create_if_absent(
            roll_number=roll_number,
            class_name=class_name,
            subject=subject,
            class_code="SEEDED",
            status=AttendanceStatus.PRESENT,
            marked_at=marked_at,
            attendance_date=marked_at.astimezone(IST).date(),
        )
        return self._by_key[(roll_number, class_name, subject, marked_at.astimezone(IST).date())]


def make_class(
    subject: str,
    start: time,
    end: time,
    *,
    class_code: str,
    class_name: str = "CSE-A",
    class_date: date = TODAY,
    year: str = "3",
    branch: str = "CSE",
) -> ScheduledClass:
    return ScheduledClass(
        class_name=class_name,
        subject=subject,
        teacher_name="R. Iyer",
        class_date=class_date,
        day=class_date.strftime("%A"),
        start_time=start,
        end_time=end,
        class_code=class_code,
        year=year,
        branch=branch,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 18, 9, 5, 0, tzinfo=IST)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents(
        [
            Student(roll_number="21CS001", name="Asha Verma", year="3", department="CSE"),
            Student(roll_number="21EC007", name="Kiran Das", year="3", department="ECE"),
        ]
    )


@pytest.fixture
def classes() -> InMemoryClasses:
    return InMemoryClasses(
        [
            make_class("Operating Systems", time(9, 0), time(10, 0), class_code="OS-0900"),
            make_class("Computer Networks", time(10, 15), time(11, 15), class_code="CN-1015"),
        ]
    )


@pytest.fixture
def locations() -> InMemoryLocations:
    return InMemoryLocations(
        [ClassLocation(class_name="CSE-A", latitude=CLASSROOM[0], longitude=CLASSROOM[1], radius=50, beacon_id=BEACON_ID)]
    )


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def container(students, classes, locations, attendance, clock):
    return build_services(
        students=students,
        classes=classes,
        locations=locations,
        attendance=attendance,
        clock=clock,
    )


@pytest.fixture
def class_factory():
    return make_class
