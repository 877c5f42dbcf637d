from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_student_class_on(
        self,
        *,
        roll_number: str,
        class_name: str,
        subject: str,
        attendance_date: date,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(
        self,
        *,
        roll_number: str,
        class_name: str,
        subject: str,
        class_code: str,
        status: AttendanceStatus,
        marked_at: datetime,
        attendance_date: date,
    ) -> Optional[int]:
        """Insert a record unless one exists for the same student, class, subject and day.

        Must be atomic. Returns the new attendance_id, or None when a record
        already existed.
        """

        raise NotImplementedError

    def list_for_student(self, roll_number: str) -> Sequence[AttendanceRecord]:
        """All records of a student, newest first."""

        raise NotImplementedError
