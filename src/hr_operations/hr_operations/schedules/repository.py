from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ShiftSchedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[ShiftSchedule]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        active_only: bool = True,
    ) -> Sequence[ShiftSchedule]:
        """All recurring schedules plus date-specific ones inside [start, end].

        Rows come back in creation order so first-match resolution is stable.
        """

        raise NotImplementedError

    def find_conflict(
        self,
        *,
        employee_id: int,
        day_of_week: Optional[int],
        work_date: Optional[date],
        exclude_id: Optional[int] = None,
    ) -> Optional[ShiftSchedule]:
        raise NotImplementedError

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
        """Insert a schedule; raises ConflictError on a duplicate slot."""

        raise NotImplementedError

    def update(self, schedule: ShiftSchedule, *, updated_by: int) -> bool:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError
