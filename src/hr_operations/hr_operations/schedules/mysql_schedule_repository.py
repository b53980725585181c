from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import IntegrityError, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import ShiftSchedule
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, employee_id, day_of_week, schedule_date, start_time, end_time, is_active, notes"


def _row_to_schedule(r: dict) -> ShiftSchedule:
    return ShiftSchedule(
        schedule_id=int(r["schedule_id"]),
        employee_id=int(r["employee_id"]),
        day_of_week=int(r["day_of_week"]) if r.get("day_of_week") is not None else None,
        work_date=r.get("schedule_date"),
        start_time=str(r["start_time"])[:5],
        end_time=str(r["end_time"])[:5],
        is_active=bool(r["is_active"]),
        notes=r.get("notes"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[ShiftSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shift_schedules WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        active_only: bool = True,
    ) -> Sequence[ShiftSchedule]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if active_only:
            clauses.append("is_active=1")
        if start is not None and end is not None:
            clauses.append("(schedule_date IS NULL OR schedule_date BETWEEN %s AND %s)")
            params.extend([start, end])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shift_schedules
                WHERE {' AND '.join(clauses)}
                ORDER BY schedule_id ASC
                """,
                tuple(params),
            )
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def find_conflict(
        self,
        *,
        employee_id: int,
        day_of_week: Optional[int],
        work_date: Optional[date],
        exclude_id: Optional[int] = None,
    ) -> Optional[ShiftSchedule]:
        if work_date is not None:
            clauses = ["employee_id=%s", "schedule_date=%s"]
            params: list[object] = [int(employee_id), work_date]
        else:
            clauses = ["employee_id=%s", "day_of_week=%s", "schedule_date IS NULL"]
            params = [int(employee_id), int(day_of_week)]
        if exclude_id is not None:
            clauses.append("schedule_id<>%s")
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shift_schedules WHERE {' AND '.join(clauses)} LIMIT 1",
                tuple(params),
            )
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        day_of_week: Optional[int],
        work_date: Optional[date],
        start_time: str,
        end_time: str,
        is_active: bool,
        notes: Optional[str],
        created_by: int,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO shift_schedules(
                        employee_id, day_of_week, schedule_date, start_time, end_time, is_active, notes, created_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        day_of_week,
                        work_date,
                        start_time,
                        end_time,
                        1 if is_active else 0,
                        notes,
                        int(created_by),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError("A shift schedule already exists for this employee on this day") from exc
            raise

    def update(self, schedule: ShiftSchedule, *, updated_by: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE shift_schedules
                    SET day_of_week=%s, schedule_date=%s, start_time=%s, end_time=%s,
                        is_active=%s, notes=%s, updated_by=%s
                    WHERE schedule_id=%s
                    """,
                    (
                        schedule.day_of_week,
                        schedule.work_date,
                        schedule.start_time,
                        schedule.end_time,
                        1 if schedule.is_active else 0,
                        schedule.notes,
                        int(updated_by),
                        int(schedule.schedule_id),
                    ),
                )
                return cur.rowcount > 0
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError("A shift schedule already exists for this employee on this day") from exc
            raise

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shift_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0
