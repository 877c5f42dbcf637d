from __future__ import annotations

from typing import Optional, Protocol

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError
