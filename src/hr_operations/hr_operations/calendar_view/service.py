from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence, TypeVar

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.service import AccessPolicy
from ..leaves.repository import LeaveRepository
from ..schedules.model import DayView
from ..schedules.repository import ScheduleRepository
from ..schedules.resolver import group_by_week, month_grid_range, resolve, week_range

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CalendarService:
    """Read side: day-by-day calendar views for one employee or a whole team."""

    def __init__(
        self,
        schedules: ScheduleRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        access: AccessPolicy,
        *,
        clock: Clock,
    ):
        self._schedules = schedules
        self._attendance = attendance
        self._leaves = leaves
        self._access = access
        self._clock = clock

    def _views_for(self, employee: Employee, start: date, end: date) -> list[DayView]:
        schedules = self._schedules.list_for_employee(employee.employee_id, start=start, end=end)
        attendance = self._attendance.list_for_employee(employee.employee_id, start=start, end=end)
        leaves = self._leaves.list_approved_for_employee(employee.employee_id, start=start, end=end)
        return resolve(schedules, attendance, leaves, start, end, employee_id=employee.employee_id)

    def day_views(self, *, actor_id: int, employee_id: int, start: date, end: date) -> list[DayView]:
        if start > end:
            raise ValidationError("start must be on or before end")
        actor = self._access.get_actor(actor_id)
        employee = self._access.require_visible(actor, employee_id)
        return self._views_for(employee, start, end)

    def week(self, *, actor_id: int, employee_id: int, anchor: Optional[date] = None) -> list[DayView]:
        start, end = week_range(anchor or self._clock.today())
        return self.day_views(actor_id=actor_id, employee_id=employee_id, start=start, end=end)

    def month(
        self,
        *,
        actor_id: int,
        employee_id: int,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> list[list[DayView]]:
        """Month grid padded to whole Monday..Sunday rows."""
        if year is None or month is None:
            today = self._clock.today()
            year = year or today.year
            month = month or today.month
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")

        start, end = month_grid_range(int(year), int(month))
        views = self.day_views(actor_id=actor_id, employee_id=employee_id, start=start, end=end)
        return group_by_week(views)

    def team_week(self, *, actor_id: int, anchor: Optional[date] = None) -> dict[int, list[DayView]]:
        """Week views for every employee the actor can see.

        A failed fetch for one employee leaves that part empty and is logged;
        the rest of the team is still returned.
        """
        actor = self._access.get_actor(actor_id)
        start, end = week_range(anchor or self._clock.today())

        result: dict[int, list[DayView]] = {}
        for employee in self._access.visible_employees(actor):
            eid = employee.employee_id
            schedules = self._fetch_or_empty(
                lambda: self._schedules.list_for_employee(eid, start=start, end=end), "schedules", eid
            )
            attendance = self._fetch_or_empty(
                lambda: self._attendance.list_for_employee(eid, start=start, end=end), "attendance", eid
            )
            leaves = self._fetch_or_empty(
                lambda: self._leaves.list_approved_for_employee(eid, start=start, end=end), "leaves", eid
            )
            result[eid] = resolve(schedules, attendance, leaves, start, end, employee_id=eid)
        return result

    @staticmethod
    def _fetch_or_empty(fetch: Callable[[], Sequence[T]], what: str, employee_id: int) -> Sequence[T]:
        try:
            return fetch()
        except Exception:
            logger.warning("Could not load %s for employee %s; showing partial calendar", what, employee_id, exc_info=True)
            return []
