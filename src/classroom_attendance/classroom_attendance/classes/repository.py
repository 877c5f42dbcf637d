from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ClassLocation, ScheduledClass


class ScheduledClassRepository(Protocol):
    def list_for_cohort_on(self, *, year: str, branch: str, class_date: date) -> Sequence[ScheduledClass]:
        """Classes for one cohort on one date, ordered by start time ascending."""

        raise NotImplementedError

    def get_by_code(self, class_code: str) -> Optional[ScheduledClass]:
        raise NotImplementedError


class ClassLocationRepository(Protocol):
    def get_by_class_name(self, class_name: str) -> Optional[ClassLocation]:
        """Case-insensitive exact match on the class name."""

        raise NotImplementedError
