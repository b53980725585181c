from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import Attendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[Attendance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[Attendance]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        """Insert today's record; raises AlreadyClockedInError if the day exists."""

        raise NotImplementedError

    def record_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        work_duration_minutes: Optional[int],
        notes: Optional[str] = None,
    ) -> bool:
        """Close an open record; False when it was already closed."""

        raise NotImplementedError
