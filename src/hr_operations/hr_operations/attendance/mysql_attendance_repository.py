from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyClockedInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import IntegrityError, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Attendance
from .repository import AttendanceRepository

ATTENDANCE_COLUMNS = (
    "attendance_id, employee_id, work_date, clock_in, clock_out, "
    "work_duration_minutes, status, notes, adjustment_id"
)


def row_to_attendance(r: dict) -> Attendance:
    # DATETIME columns hold UTC.
    return Attendance(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in=from_utc_naive(r.get("clock_in")),
        clock_out=from_utc_naive(r.get("clock_out")),
        work_duration_minutes=int(r["work_duration_minutes"]) if r.get("work_duration_minutes") is not None else None,
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        adjustment_id=int(r["adjustment_id"]) if r.get("adjustment_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, tz: ZoneInfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return row_to_attendance(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return row_to_attendance(r) if r else None

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {ATTENDANCE_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [row_to_attendance(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # A pre-created row without a punch (e.g. ABSENT) is claimed instead of duplicated.
                cur.execute(
                    """
                    UPDATE attendance
                    SET clock_in=%s, status=%s, notes=%s
                    WHERE employee_id=%s AND work_date=%s AND clock_in IS NULL
                    """,
                    (to_utc_naive(clock_in, self._tz), status.value, notes, int(employee_id), work_date),
                )
                if cur.rowcount:
                    cur.execute(
                        "SELECT attendance_id FROM attendance WHERE employee_id=%s AND work_date=%s",
                        (int(employee_id), work_date),
                    )
                    return int(fetchone(cur)["attendance_id"])

                cur.execute(
                    """
                    INSERT INTO attendance(employee_id, work_date, clock_in, status, notes)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, to_utc_naive(clock_in, self._tz), status.value, notes),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise AlreadyClockedInError("Already clocked in today") from exc
            raise

    def record_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        work_duration_minutes: Optional[int],
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, work_duration_minutes=%s, notes=%s
                WHERE attendance_id=%s AND clock_out IS NULL
                """,
                (to_utc_naive(clock_out, self._tz), work_duration_minutes, notes, int(attendance_id)),
            )
            return cur.rowcount > 0
