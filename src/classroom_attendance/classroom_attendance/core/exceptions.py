from __future__ import annotations

from typing import Any, Optional

from .enums import Entity


class DomainError(Exception):
    """Base exception for business rule violations.

    Subclasses carry a stable ``code``, the HTTP status the API layer answers
    with, and whatever figures explain the rejection (``details``).
    """

    code = "domain_error"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.code, **self.details()}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class NotFoundError(DomainError):
    code = "not_found"
    http_status = 404

    _messages = {
        Entity.STUDENT: "Student not found",
        Entity.CLASS: "No matching class found for today",
        Entity.LOCATION: "Class location data not found",
    }

    def __init__(self, entity: Entity):
        super().__init__(self._messages[entity])
        self.entity = entity

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity.value}


class OutOfRangeError(DomainError):
    """Submitted coordinates fall outside the class geofence."""

    code = "out_of_range"
    http_status = 403

    def __init__(self, *, distance: float, allowed_radius: float):
        super().__init__("You are not within the class area")
        self.distance = distance
        self.allowed_radius = allowed_radius

    def details(self) -> dict[str, Any]:
        return {"distance": round(self.distance), "allowedRadius": self.allowed_radius}


class MisconfiguredError(DomainError):
    code = "misconfigured"

    def __init__(self, component: str):
        super().__init__(f"No {component} ID configured for this class")
        self.component = component

    def details(self) -> dict[str, Any]:
        return {"component": self.component}


class BeaconMismatchError(DomainError):
    code = "beacon_mismatch"
    http_status = 403

    def __init__(self, *, expected: Optional[str], received: Optional[str]):
        super().__init__("Required beacon not detected or out of range")
        self.expected = expected
        self.received = received

    def details(self) -> dict[str, Any]:
        return {"expectedBeaconId": self.expected, "receivedBeaconId": self.received}


class CodeMismatchError(DomainError):
    code = "code_mismatch"
    http_status = 403

    def __init__(self, *, expected: str):
        super().__init__("Invalid class code provided")
        self.expected = expected

    def details(self) -> dict[str, Any]:
        return {"expected": self.expected}


class TooEarlyError(DomainError):
    code = "too_early"
    http_status = 403

    def __init__(self, *, minutes_until_start: int):
        super().__init__("Class has not started yet")
        self.minutes_until_start = minutes_until_start

    def details(self) -> dict[str, Any]:
        return {"minutesUntilStart": self.minutes_until_start}


class WindowExpiredError(DomainError):
    code = "window_expired"
    http_status = 403

    def __init__(self, *, minutes_late: int):
        super().__init__("Attendance window has expired")
        self.minutes_late = minutes_late

    def details(self) -> dict[str, Any]:
        return {"minutesLate": self.minutes_late}


class AlreadyMarkedError(DomainError):
    code = "already_marked"

    def __init__(self):
        super().__init__("Attendance already submitted for this class")
