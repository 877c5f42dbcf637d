from __future__ import annotations

from enum import Enum


class NotificationStatus(str, Enum):
    """Display status of a scheduled class for a student."""

    UPCOMING = "upcoming"
    STARTING_SOON = "starting_soon"
    ACTIVE = "active"
    EXPIRED = "expired"
    MARKED = "marked"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "Present"


class Entity(str, Enum):
    """Entities that can be reported as missing."""

    STUDENT = "student"
    CLASS = "class"
    LOCATION = "location"
