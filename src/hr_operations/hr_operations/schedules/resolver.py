"""Day-by-day resolution of schedules, attendance and leave.

Every calendar, week grid and dashboard widget goes through `resolve` so the
tie-breaking rules live in one place:

* an active date-specific schedule for the day beats any recurring one;
* among equal candidates the first one in input order wins;
* approved leave wins over everything when the day is classified.

The functions here are pure: no I/O, no clock, no hidden state.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Sequence

from ..attendance.model import Attendance
from ..common.datetime_utils import day_of_week, iter_dates
from ..core.enums import ApprovalStatus, DayStatus
from ..leaves.model import LeaveRequest
from .model import DayView, ShiftSchedule


def select_schedule(schedules: Iterable[ShiftSchedule], work_date: date) -> Optional[ShiftSchedule]:
    """Pick the single effective schedule for `work_date`, or None."""
    dow = day_of_week(work_date)
    recurring: Optional[ShiftSchedule] = None
    for sc in schedules:
        if not sc.is_active:
            continue
        if sc.work_date is not None:
            if sc.work_date == work_date:
                return sc
        elif recurring is None and sc.day_of_week == dow:
            recurring = sc
    return recurring


def resolve(
    schedules: Sequence[ShiftSchedule],
    attendance: Sequence[Attendance],
    approved_leaves: Sequence[LeaveRequest],
    start: date,
    end: date,
    *,
    employee_id: Optional[int] = None,
) -> list[DayView]:
    """Return one DayView per day in [start, end], ascending.

    When `employee_id` is given, records of other employees are ignored, so a
    caller may pass team-wide data. Without it the inputs must all belong to
    one employee, whose id is stamped on every view. Leaves that are not
    APPROVED never count.
    """
    if employee_id is None:
        employee_id = _single_employee(schedules, attendance, approved_leaves)

    def _mine(items):
        if employee_id is None:
            return list(items)
        return [x for x in items if x.employee_id == employee_id]

    dated: dict[date, ShiftSchedule] = {}
    recurring: dict[int, ShiftSchedule] = {}
    for sc in _mine(schedules):
        if not sc.is_active:
            continue
        if sc.work_date is not None:
            dated.setdefault(sc.work_date, sc)
        elif sc.day_of_week is not None:
            recurring.setdefault(sc.day_of_week, sc)

    attendance_by_date: dict[date, Attendance] = {}
    for rec in _mine(attendance):
        attendance_by_date.setdefault(rec.work_date, rec)

    leaves = [lv for lv in _mine(approved_leaves) if lv.status == ApprovalStatus.APPROVED]

    views: list[DayView] = []
    for d in iter_dates(start, end):
        schedule = dated.get(d) or recurring.get(day_of_week(d))
        views.append(
            DayView(
                work_date=d,
                employee_id=employee_id,
                schedule=schedule,
                attendance=attendance_by_date.get(d),
                leaves=tuple(lv for lv in leaves if lv.covers(d)),
            )
        )
    return views


def _single_employee(*groups: Sequence) -> Optional[int]:
    ids = {item.employee_id for group in groups for item in group}
    if len(ids) > 1:
        raise ValueError(f"employee_id is required when records span several employees: {sorted(ids)}")
    return next(iter(ids), None)


def derive_day_status(view: DayView) -> DayStatus:
    return view.status


def week_range(anchor: date) -> tuple[date, date]:
    """Monday..Sunday week containing `anchor`."""
    monday = anchor - timedelta(days=anchor.weekday())
    return monday, monday + timedelta(days=6)


def month_grid_range(year: int, month: int) -> tuple[date, date]:
    """Full-week grid for a month: Monday on/before the 1st to Sunday on/after the last day."""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    return first - timedelta(days=first.weekday()), last + timedelta(days=6 - last.weekday())


def group_by_week(views: Sequence[DayView]) -> list[list[DayView]]:
    """Split consecutive day views into rows that start on Monday."""
    rows: list[list[DayView]] = []
    for view in views:
        if not rows or view.work_date.weekday() == 0:
            rows.append([])
        rows[-1].append(view)
    return rows


def is_within_shift(schedule: ShiftSchedule, instant: datetime, tz: tzinfo) -> bool:
    """Whether `instant` falls inside the shift window on its local day.

    Overnight shifts (end at or before start) wrap around midnight.
    """
    local = instant.astimezone(tz) if instant.tzinfo else instant.replace(tzinfo=tz)
    start = local.replace(hour=schedule.start.hour, minute=schedule.start.minute, second=0, microsecond=0)
    end = local.replace(hour=schedule.end.hour, minute=schedule.end.minute, second=0, microsecond=0)

    if schedule.is_overnight:
        return local >= start or local <= end
    return start <= local <= end
