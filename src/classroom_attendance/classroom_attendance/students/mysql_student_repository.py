from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT roll_number, name, year, department
                FROM students
                WHERE roll_number=%s
                """,
                (roll_number,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Student(
                roll_number=row["roll_number"],
                name=row["name"],
                year=str(row["year"]),
                department=row["department"],
            )
