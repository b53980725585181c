from __future__ import annotations

import logging
from datetime import date, datetime

import pytest

from src.hr_operations.hr_operations.calendar_view.service import CalendarService
from src.hr_operations.hr_operations.core.enums import DayStatus
from src.hr_operations.hr_operations.core.exceptions import NotFoundError, ValidationError
from src.hr_operations.hr_operations.employees.service import AccessPolicy
from src.hr_operations.hr_operations.schedules.model import ShiftSchedule

from tests.fakes import (
    JAKARTA,
    InMemoryAttendance,
    InMemoryLeaves,
    InMemorySchedules,
    approved_leave,
    attendance_record,
    make_clock,
    standard_team,
)


def build(leaves=None):
    schedules = InMemorySchedules(
        ShiftSchedule(1, 3, "08:00", "16:00", day_of_week=1),
        ShiftSchedule(2, 3, "09:00", "17:00", work_date=date(2024, 1, 15)),
        ShiftSchedule(3, 4, "10:00", "18:00", day_of_week=2),
    )
    attendance = InMemoryAttendance(
        attendance_record(
            1,
            3,
            date(2024, 1, 15),
            datetime(2024, 1, 15, 9, 0, tzinfo=JAKARTA),
            datetime(2024, 1, 15, 17, 0, tzinfo=JAKARTA),
        )
    )
    leaves = leaves if leaves is not None else InMemoryLeaves(approved_leave(1, 4, date(2024, 1, 16), date(2024, 1, 17)))
    return CalendarService(schedules, attendance, leaves, AccessPolicy(standard_team()), clock=make_clock())


def test_week_defaults_to_current_week():
    views = build().week(actor_id=3, employee_id=3)

    assert [v.work_date for v in views][0] == date(2024, 1, 15)
    assert views[-1].work_date == date(2024, 1, 21)
    monday = views[0]
    assert monday.schedule.schedule_id == 2
    assert monday.status == DayStatus.COMPLETED


def test_week_with_anchor():
    views = build().week(actor_id=3, employee_id=3, anchor=date(2024, 1, 24))
    assert views[0].work_date == date(2024, 1, 22)
    assert views[0].schedule.schedule_id == 1
    assert views[0].status == DayStatus.SCHEDULED


def test_month_grid_rows():
    rows = build().month(actor_id=2, employee_id=3, year=2024, month=2)
    assert len(rows) == 5
    assert rows[0][0].work_date == date(2024, 1, 29)
    assert rows[-1][-1].work_date == date(2024, 3, 3)


def test_month_defaults_to_clock_month():
    rows = build().month(actor_id=3, employee_id=3)
    assert rows[0][0].work_date == date(2024, 1, 1)
    with pytest.raises(ValidationError):
        build().month(actor_id=3, employee_id=3, year=2024, month=13)


def test_leave_hides_supervisor_shift():
    views = build().day_views(actor_id=2, employee_id=4, start=date(2024, 1, 16), end=date(2024, 1, 16))
    assert views[0].status == DayStatus.ON_LEAVE
    assert views[0].display_schedule is None


def test_invisible_employee_is_not_found():
    with pytest.raises(NotFoundError):
        build().week(actor_id=3, employee_id=4)
    with pytest.raises(NotFoundError):
        build().week(actor_id=5, employee_id=3)


def test_reversed_range_is_rejected():
    with pytest.raises(ValidationError):
        build().day_views(actor_id=3, employee_id=3, start=date(2024, 1, 20), end=date(2024, 1, 10))


def test_team_week_covers_visible_team():
    team = build().team_week(actor_id=2)
    assert sorted(team) == [2, 3, 4]
    assert all(len(views) == 7 for views in team.values())
    assert team[4][1].status == DayStatus.ON_LEAVE


def test_team_week_degrades_per_employee(caplog):
    leaves = InMemoryLeaves(
        approved_leave(1, 3, date(2024, 1, 18), date(2024, 1, 18)),
        approved_leave(2, 4, date(2024, 1, 16), date(2024, 1, 17)),
        failing_for=(4,),
    )
    with caplog.at_level(logging.WARNING):
        team = build(leaves).team_week(actor_id=2)

    assert sorted(team) == [2, 3, 4]
    # Employee 4 keeps schedules but loses leave data.
    assert team[4][1].status == DayStatus.SCHEDULED
    assert team[3][3].status == DayStatus.ON_LEAVE
    assert "Could not load leaves for employee 4" in caplog.text
