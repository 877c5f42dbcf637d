from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = "attendance_id, roll_number, class_name, subject, class_code, status, marked_at, attendance_date"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        roll_number=r["roll_number"],
        class_name=r["class_name"],
        subject=r["subject"],
        class_code=r["class_code"],
        status=AttendanceStatus(r["status"]),
        marked_at=from_utc_naive(r["marked_at"]),
        attendance_date=r["attendance_date"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_class_on(
        self,
        *,
        roll_number: str,
        class_name: str,
        subject: str,
        attendance_date: date,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE roll_number=%s AND class_name=%s AND subject=%s AND attendance_date=%s
                """,
                (roll_number, class_name, subject, attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_if_absent(
        self,
        *,
        roll_number: str,
        class_name: str,
        subject: str,
        class_code: str,
        status: AttendanceStatus,
        marked_at: datetime,
        attendance_date: date,
    ) -> Optional[int]:
        # uq_attendance_once decides; there is no SELECT before the INSERT.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records
                        (roll_number, class_name, subject, class_code, status, marked_at, attendance_date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        roll_number,
                        class_name,
                        subject,
                        class_code,
                        status.value,
                        to_utc_naive(marked_at),
                        attendance_date,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                logger.debug("Duplicate attendance for %s/%s/%s on %s", roll_number, class_name, subject, attendance_date)
                return None
            raise

    def list_for_student(self, roll_number: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE roll_number=%s
                ORDER BY marked_at DESC, attendance_id DESC
                """,
                (roll_number,),
            )
            return [_to_record(r) for r in fetchall(cur)]
