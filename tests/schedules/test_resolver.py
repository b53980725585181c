from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.hr_operations.hr_operations.core.enums import ApprovalStatus, DayStatus
from src.hr_operations.hr_operations.schedules.model import ShiftSchedule
from src.hr_operations.hr_operations.schedules.resolver import (
    derive_day_status,
    group_by_week,
    is_within_shift,
    month_grid_range,
    resolve,
    select_schedule,
    week_range,
)

from tests.fakes import JAKARTA, approved_leave, attendance_record

MONDAY = date(2024, 1, 15)


def recurring(schedule_id, dow, start="08:00", end="16:00", employee_id=3, is_active=True):
    return ShiftSchedule(schedule_id, employee_id, start, end, day_of_week=dow, is_active=is_active)


def dated(schedule_id, d, start="09:00", end="17:00", employee_id=3, is_active=True):
    return ShiftSchedule(schedule_id, employee_id, start, end, work_date=d, is_active=is_active)


def test_one_view_per_day_contiguous_and_ascending():
    start, end = date(2024, 1, 28), date(2024, 2, 3)
    views = resolve([], [], [], start, end)

    assert [v.work_date for v in views] == [start + timedelta(days=i) for i in range(7)]


def test_empty_when_start_after_end():
    assert resolve([recurring(1, 1)], [], [], date(2024, 1, 16), date(2024, 1, 15)) == []


def test_date_specific_beats_recurring_on_same_monday():
    schedules = [recurring(1, 1, "08:00", "16:00"), dated(2, MONDAY, "09:00", "17:00")]

    (view,) = resolve(schedules, [], [], MONDAY, MONDAY, employee_id=3)

    assert view.schedule.schedule_id == 2
    assert (view.schedule.start_time, view.schedule.end_time) == ("09:00", "17:00")


def test_date_specific_wins_regardless_of_input_order():
    schedules = [dated(2, MONDAY), recurring(1, 1)]
    assert resolve(schedules, [], [], MONDAY, MONDAY)[0].schedule.schedule_id == 2
    assert resolve(list(reversed(schedules)), [], [], MONDAY, MONDAY)[0].schedule.schedule_id == 2


def test_first_match_wins_among_equal_candidates():
    schedules = [recurring(7, 1, "06:00", "14:00"), recurring(8, 1, "14:00", "22:00")]
    assert resolve(schedules, [], [], MONDAY, MONDAY)[0].schedule.schedule_id == 7
    assert select_schedule(schedules, MONDAY).schedule_id == 7


def test_inactive_schedules_are_ignored():
    schedules = [dated(2, MONDAY, is_active=False), recurring(1, 1)]
    assert resolve(schedules, [], [], MONDAY, MONDAY)[0].schedule.schedule_id == 1


def test_day_of_week_uses_sunday_zero():
    sunday = date(2024, 1, 14)
    (view,) = resolve([recurring(1, 0)], [], [], sunday, sunday)
    assert view.schedule is not None
    assert resolve([recurring(1, 0)], [], [], MONDAY, MONDAY)[0].schedule is None


def test_records_of_other_employees_are_ignored_when_filtering():
    schedules = [recurring(1, 1, employee_id=9), recurring(2, 1, employee_id=3)]
    attendance = [attendance_record(1, 9, MONDAY, datetime(2024, 1, 15, 8, tzinfo=JAKARTA))]

    (view,) = resolve(schedules, attendance, [], MONDAY, MONDAY, employee_id=3)

    assert view.schedule.schedule_id == 2
    assert view.attendance is None


def test_approved_leave_forces_on_leave_and_hides_schedule():
    record = attendance_record(
        1, 3, MONDAY, datetime(2024, 1, 15, 8, tzinfo=JAKARTA), datetime(2024, 1, 15, 16, tzinfo=JAKARTA)
    )
    leave = approved_leave(1, 3, date(2024, 1, 14), date(2024, 1, 16))

    (view,) = resolve([recurring(1, 1)], [record], [leave], MONDAY, MONDAY)

    assert view.leaves
    assert derive_day_status(view) == DayStatus.ON_LEAVE
    assert view.schedule is not None
    assert view.display_schedule is None


def test_leave_range_is_inclusive_on_both_ends():
    leave = approved_leave(1, 3, date(2024, 1, 15), date(2024, 1, 17))
    views = resolve([], [], [leave], date(2024, 1, 14), date(2024, 1, 18))
    assert [bool(v.leaves) for v in views] == [False, True, True, True, False]


def test_non_approved_leaves_never_count():
    pending = approved_leave(1, 3, MONDAY, MONDAY, status=ApprovalStatus.PENDING)
    (view,) = resolve([recurring(1, 1)], [], [pending], MONDAY, MONDAY)
    assert view.leaves == ()
    assert view.status == DayStatus.SCHEDULED


def test_status_priority_without_leave():
    tuesday, wednesday, thursday = date(2024, 1, 16), date(2024, 1, 17), date(2024, 1, 18)
    attendance = [
        attendance_record(1, 3, MONDAY, datetime(2024, 1, 15, 8, tzinfo=JAKARTA), datetime(2024, 1, 15, 16, tzinfo=JAKARTA)),
        attendance_record(2, 3, tuesday, datetime(2024, 1, 16, 8, tzinfo=JAKARTA)),
    ]
    schedules = [recurring(1, 3)]

    views = resolve(schedules, attendance, [], MONDAY, thursday)

    assert [v.status for v in views] == [
        DayStatus.COMPLETED,
        DayStatus.IN_PROGRESS,
        DayStatus.SCHEDULED,
        DayStatus.UNSCHEDULED,
    ]
    assert views[2].work_date == wednesday


def test_resolve_is_idempotent():
    args = (
        [recurring(1, 1), dated(2, date(2024, 1, 17))],
        [attendance_record(1, 3, MONDAY, datetime(2024, 1, 15, 8, tzinfo=JAKARTA))],
        [approved_leave(1, 3, date(2024, 1, 19), date(2024, 1, 19))],
        MONDAY,
        date(2024, 1, 21),
    )
    assert resolve(*args) == resolve(*args)


def test_week_range_is_monday_to_sunday():
    assert week_range(date(2024, 1, 18)) == (date(2024, 1, 15), date(2024, 1, 21))
    assert week_range(date(2024, 1, 21)) == (date(2024, 1, 15), date(2024, 1, 21))


def test_month_grid_pads_to_full_weeks():
    # January 2024 starts on a Monday and ends on a Wednesday.
    assert month_grid_range(2024, 1) == (date(2024, 1, 1), date(2024, 2, 4))
    # February 2024 (leap year) starts on a Thursday.
    assert month_grid_range(2024, 2) == (date(2024, 1, 29), date(2024, 3, 3))


def test_group_by_week_rows_start_on_monday():
    start, end = month_grid_range(2024, 2)
    rows = group_by_week(resolve([], [], [], start, end))

    assert len(rows) == 5
    assert all(len(row) == 7 for row in rows)
    assert all(row[0].work_date.weekday() == 0 for row in rows)


def test_is_within_shift_day_and_overnight():
    day = recurring(1, 1, "08:00", "16:00")
    night = recurring(2, 1, "22:00", "06:00")
    assert night.is_overnight and not day.is_overnight

    assert is_within_shift(day, datetime(2024, 1, 15, 9, 0, tzinfo=JAKARTA), JAKARTA)
    assert not is_within_shift(day, datetime(2024, 1, 15, 17, 0, tzinfo=JAKARTA), JAKARTA)
    assert is_within_shift(night, datetime(2024, 1, 15, 23, 0, tzinfo=JAKARTA), JAKARTA)
    assert is_within_shift(night, datetime(2024, 1, 15, 5, 0, tzinfo=JAKARTA), JAKARTA)
    assert not is_within_shift(night, datetime(2024, 1, 15, 12, 0, tzinfo=JAKARTA), JAKARTA)


def test_views_carry_the_employee_of_the_inputs():
    views = resolve([recurring(1, 1, employee_id=4)], [], [], MONDAY, date(2024, 1, 16))
    assert [v.employee_id for v in views] == [4, 4]

    with pytest.raises(ValueError):
        resolve([recurring(1, 1, employee_id=4), recurring(2, 1, employee_id=3)], [], [], MONDAY, MONDAY)
    (view,) = resolve(
        [recurring(1, 1, employee_id=4), recurring(2, 1, employee_id=3)], [], [], MONDAY, MONDAY, employee_id=3
    )
    assert (view.employee_id, view.schedule.schedule_id) == (3, 2)
