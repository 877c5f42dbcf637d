from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ClassLocation, ScheduledClass
from .repository import ClassLocationRepository, ScheduledClassRepository

_CLASS_COLUMNS = """
    class_name, subject, teacher_name, class_date, day,
    start_time, end_time, class_code, year, branch
"""


def _to_scheduled_class(r: Dict[str, Any]) -> ScheduledClass:
    return ScheduledClass(
        class_name=r["class_name"],
        subject=r["subject"],
        teacher_name=r["teacher_name"],
        class_date=r["class_date"],
        day=r["day"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        class_code=r["class_code"],
        year=str(r["year"]),
        branch=r["branch"],
    )


class MySQLScheduledClassRepository(ScheduledClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_cohort_on(self, *, year: str, branch: str, class_date: date) -> Sequence[ScheduledClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLASS_COLUMNS}
                FROM scheduled_classes
                WHERE year=%s AND branch=%s AND class_date=%s
                ORDER BY start_time ASC
                """,
                (str(year), branch, class_date),
            )
            return [_to_scheduled_class(r) for r in fetchall(cur)]

    def get_by_code(self, class_code: str) -> Optional[ScheduledClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLASS_COLUMNS}
                FROM scheduled_classes
                WHERE class_code=%s
                """,
                (class_code,),
            )
            r = fetchone(cur)
            return _to_scheduled_class(r) if r else None


class MySQLClassLocationRepository(ClassLocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_class_name(self, class_name: str) -> Optional[ClassLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_name, latitude, longitude, radius, beacon_id
                FROM class_locations
                WHERE LOWER(class_name)=LOWER(%s)
                LIMIT 1
                """,
                (class_name,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ClassLocation(
                class_name=r["class_name"],
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                radius=float(r["radius"]),
                beacon_id=r.get("beacon_id"),
            )
