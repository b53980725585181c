from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import Clock, ensure_aware, local_date
from ..core.constants import OVERTIME_NOTE
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import (
    AlreadyClockedInError,
    AlreadyClockedOutError,
    NoShiftScheduledError,
    NotClockedInError,
    NotFoundError,
)
from ..employees.model import Employee
from ..employees.service import AccessPolicy
from ..schedules.model import ShiftSchedule
from ..schedules.repository import ScheduleRepository
from ..schedules.resolver import is_within_shift, select_schedule
from .calculator import RoundingPolicy, calculate_work_duration
from .model import Attendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _with_note(notes: Optional[str], extra: str) -> str:
    notes = (notes or "").strip()
    return f"{notes} | {extra}" if notes else extra


class AttendanceService:
    """Use case: clock-in / clock-out punches.

    Failures are raised as structured errors (already clocked in, no shift,
    ...) so callers never need to inspect message text.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        access: AccessPolicy,
        *,
        clock: Clock,
        rounding: RoundingPolicy | None = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._access = access
        self._clock = clock
        self._rounding = rounding or RoundingPolicy()

    def _now(self, now: datetime | None) -> datetime:
        return ensure_aware(now, self._clock.tz) if now else self._clock.now()

    def _schedule_for(self, employee: Employee, work_date: date) -> Optional[ShiftSchedule]:
        schedules = self._schedules.list_for_employee(employee.employee_id, start=work_date, end=work_date)
        schedule = select_schedule(schedules, work_date)
        if schedule is None and employee.role != Role.OWNER:
            raise NoShiftScheduledError(
                "You do not have a shift scheduled for today. Please contact your manager to schedule a shift."
            )
        return schedule

    def _reload(self, attendance_id: int) -> Attendance:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance not found")
        return record

    def clock_in(self, employee_id: int, *, now: datetime | None = None, notes: Optional[str] = None) -> Attendance:
        employee = self._access.get_actor(employee_id)
        now = self._now(now)
        today = local_date(now, self._clock.tz)

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if existing and existing.clock_in is not None:
            raise AlreadyClockedInError("Already clocked in today")

        schedule = self._schedule_for(employee, today)
        # Outside the shift is allowed; it is tracked as overtime.
        if schedule is None or not is_within_shift(schedule, now, self._clock.tz):
            notes = _with_note(notes, f"Clock-in {OVERTIME_NOTE}")

        attendance_id = self._attendance.create_clock_in(
            employee_id=employee.employee_id,
            work_date=today,
            clock_in=now,
            status=AttendanceStatus.PRESENT,
            notes=(notes or "").strip() or None,
        )
        logger.info("Employee %s clocked in for %s", employee.employee_id, today.isoformat())
        return self._reload(attendance_id)

    def clock_out(self, employee_id: int, *, now: datetime | None = None, notes: Optional[str] = None) -> Attendance:
        employee = self._access.get_actor(employee_id)
        now = self._now(now)
        today = local_date(now, self._clock.tz)

        record = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if not record or record.clock_in is None:
            raise NotClockedInError("Must clock in first")

        schedule = self._schedule_for(employee, today)
        if record.clock_out is not None:
            raise AlreadyClockedOutError("Already clocked out today")

        combined = record.notes
        if notes and notes.strip():
            combined = _with_note(combined, notes.strip())
        if schedule is None or not is_within_shift(schedule, now, self._clock.tz):
            combined = _with_note(combined, f"Clock-out {OVERTIME_NOTE}")

        duration = calculate_work_duration(record.clock_in, now, self._rounding)
        closed = self._attendance.record_clock_out(
            attendance_id=record.attendance_id,
            clock_out=now,
            work_duration_minutes=duration,
            notes=combined,
        )
        if not closed:
            raise AlreadyClockedOutError("Already clocked out today")

        logger.info("Employee %s clocked out for %s (%s min)", employee.employee_id, today.isoformat(), duration)
        return self._reload(record.attendance_id)

    def today_record(self, employee_id: int, *, now: datetime | None = None) -> Optional[Attendance]:
        employee = self._access.get_actor(employee_id)
        today = local_date(self._now(now), self._clock.tz)
        return self._attendance.get_for_employee_and_date(employee.employee_id, today)
