from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..common.datetime_utils import ReferenceClock
from ..core.enums import Entity
from ..core.exceptions import NotFoundError
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository


@dataclass(frozen=True)
class AttendanceHistoryRow:
    class_name: str
    subject: str
    status: str
    date: str
    time: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "className": self.class_name,
            "subject": self.subject,
            "status": self.status,
            "date": self.date,
            "time": self.time,
        }


class AttendanceHistoryService:
    """Use case: a student's attendance history, newest first."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository, *, clock: ReferenceClock):
        self._attendance = attendance
        self._students = students
        self._clock = clock

    def get_history(self, roll_number: str) -> list[AttendanceHistoryRow]:
        if not self._students.get_by_roll_number(roll_number):
            raise NotFoundError(Entity.STUDENT)

        records = sorted(
            self._attendance.list_for_student(roll_number),
            key=lambda r: r.marked_at,
            reverse=True,
        )
        return [self._to_row(r) for r in records]

    def _to_row(self, r: AttendanceRecord) -> AttendanceHistoryRow:
        local = self._clock.localize(r.marked_at)
        return AttendanceHistoryRow(
            class_name=r.class_name,
            subject=r.subject,
            status=r.status.value,
            # e.g. "Oct 18, 2026" / "09:05 AM"
            date=f"{local:%b} {local.day}, {local.year}",
            time=local.strftime("%I:%M %p"),
        )
