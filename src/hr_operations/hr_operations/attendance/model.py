from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Attendance:
    """Domain entity: one employee's punches for one local calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    status: AttendanceStatus
    work_duration_minutes: Optional[int] = None
    notes: Optional[str] = None
    adjustment_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.clock_in is not None and self.clock_out is None
