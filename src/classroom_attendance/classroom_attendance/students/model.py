from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a student, identified by roll number.

    Year and department select which scheduled classes the student attends.
    """

    roll_number: str
    name: str
    year: str
    department: str
