from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..attendance.model import Attendance
from ..core.enums import DayStatus
from ..leaves.model import LeaveRequest


@dataclass(frozen=True)
class ShiftSchedule:
    """Shift rule for one employee.

    Exactly one of `day_of_week` (recurring, 0=Sunday..6=Saturday) and
    `work_date` (one-off) is set. Times are "HH:mm"; an end at or before the
    start means the shift runs past midnight.
    """

    schedule_id: int
    employee_id: int
    start_time: str
    end_time: str
    day_of_week: Optional[int] = None
    work_date: Optional[date] = None
    is_active: bool = True
    notes: Optional[str] = None

    @property
    def is_recurring(self) -> bool:
        return self.work_date is None

    @property
    def start(self) -> time:
        return datetime.strptime(self.start_time, "%H:%M").time()

    @property
    def end(self) -> time:
        return datetime.strptime(self.end_time, "%H:%M").time()

    @property
    def is_overnight(self) -> bool:
        return self.end <= self.start


@dataclass(frozen=True)
class DayView:
    """Read-only projection of schedule + attendance + leave for one day."""

    work_date: date
    employee_id: Optional[int]
    schedule: Optional[ShiftSchedule]
    attendance: Optional[Attendance]
    leaves: tuple[LeaveRequest, ...] = ()

    @property
    def status(self) -> DayStatus:
        if self.leaves:
            return DayStatus.ON_LEAVE
        if self.attendance is not None and self.attendance.clock_in is not None:
            if self.attendance.clock_out is not None:
                return DayStatus.COMPLETED
            return DayStatus.IN_PROGRESS
        if self.schedule is not None:
            return DayStatus.SCHEDULED
        return DayStatus.UNSCHEDULED

    @property
    def display_schedule(self) -> Optional[ShiftSchedule]:
        # Approved leave hides the shift for that day.
        return None if self.leaves else self.schedule
