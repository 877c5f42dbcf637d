from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class ScheduledClass:
    """A class session scheduled for one cohort (year + branch) on one date."""

    class_name: str
    subject: str
    teacher_name: str
    class_date: date
    day: str
    start_time: time
    end_time: time
    class_code: str
    year: str
    branch: str


@dataclass(frozen=True)
class ClassLocation:
    """Geofence and beacon configuration of a classroom."""

    class_name: str
    latitude: float
    longitude: float
    radius: float
    beacon_id: Optional[str] = None
