from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark.

    ``marked_at`` is an aware UTC instant. ``attendance_date`` is the calendar
    day of the mark in the reference timezone; together with roll number,
    class name and subject it identifies the record.
    """

    attendance_id: int
    roll_number: str
    class_name: str
    subject: str
    class_code: str
    status: AttendanceStatus
    marked_at: datetime
    attendance_date: date
