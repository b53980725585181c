"""In-memory repositories shared by the service and API tests."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from src.hr_operations.hr_operations.adjustments.model import AttendanceAdjustment
from src.hr_operations.hr_operations.attendance.model import Attendance
from src.hr_operations.hr_operations.audit.model import AuditEntry
from src.hr_operations.hr_operations.common.datetime_utils import Clock
from src.hr_operations.hr_operations.core.enums import ApprovalStatus, AttendanceStatus, EmployeeStatus, Role
from src.hr_operations.hr_operations.core.exceptions import AlreadyClockedInError, ConflictError, NotFoundError
from src.hr_operations.hr_operations.employees.model import Employee
from src.hr_operations.hr_operations.leaves.model import LeaveRequest
from src.hr_operations.hr_operations.schedules.model import ShiftSchedule

JAKARTA = ZoneInfo("Asia/Jakarta")

# Monday.
DEFAULT_NOW = datetime(2024, 1, 15, 9, 30, tzinfo=JAKARTA)


@dataclass(frozen=True)
class FixedClock(Clock):
    instant: datetime = DEFAULT_NOW

    def now(self) -> datetime:
        return self.instant.astimezone(self.tz)


def make_clock(instant: datetime = DEFAULT_NOW) -> FixedClock:
    return FixedClock(tz=JAKARTA, instant=instant)


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self.by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self.by_id[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(int(employee_id))

    def list_direct_reports(self, manager_id: int, *, status: Optional[EmployeeStatus] = None):
        return [
            e
            for e in self.by_id.values()
            if e.manager_id == manager_id and (status is None or e.status == status)
        ]

    def list_by_status(self, status: EmployeeStatus):
        return [e for e in self.by_id.values() if e.status == status]


def standard_team() -> InMemoryEmployees:
    """Owner 1; manager 2 with reports 3 and 4; manager 5 with report 6."""
    return InMemoryEmployees(
        Employee(1, "Olivia Owner", Role.OWNER),
        Employee(2, "Mark Manager", Role.MANAGER, manager_id=1),
        Employee(3, "Erin Employee", Role.EMPLOYEE, manager_id=2),
        Employee(4, "Sam Supervisor", Role.SUPERVISOR, manager_id=2),
        Employee(5, "Nina Manager", Role.MANAGER, manager_id=1),
        Employee(6, "Tom Employee", Role.EMPLOYEE, manager_id=5),
    )


class InMemorySchedules:
    def __init__(self, *schedules: ShiftSchedule):
        self.items: list[ShiftSchedule] = list(schedules)
        self._next_id = max([s.schedule_id for s in schedules], default=0) + 1

    def get_by_id(self, schedule_id: int) -> Optional[ShiftSchedule]:
        return next((s for s in self.items if s.schedule_id == int(schedule_id)), None)

    def list_for_employee(self, employee_id, *, start=None, end=None, active_only=True):
        result = []
        for s in self.items:
            if s.employee_id != employee_id or (active_only and not s.is_active):
                continue
            if s.work_date is not None:
                if start is not None and s.work_date < start:
                    continue
                if end is not None and s.work_date > end:
                    continue
            result.append(s)
        return result

    def find_conflict(self, *, employee_id, day_of_week, work_date, exclude_id=None):
        for s in self.items:
            if s.employee_id != employee_id or s.schedule_id == exclude_id:
                continue
            if work_date is not None and s.work_date == work_date:
                return s
            if day_of_week is not None and s.day_of_week == day_of_week:
                return s
        return None

    def create(self, *, employee_id, day_of_week, work_date, start_time, end_time, is_active, notes, created_by):
        if self.find_conflict(employee_id=employee_id, day_of_week=day_of_week, work_date=work_date):
            raise ConflictError("duplicate slot")
        schedule_id = self._next_id
        self._next_id += 1
        self.items.append(
            ShiftSchedule(
                schedule_id=schedule_id,
                employee_id=employee_id,
                day_of_week=day_of_week,
                work_date=work_date,
                start_time=start_time,
                end_time=end_time,
                is_active=is_active,
                notes=notes,
            )
        )
        return schedule_id

    def update(self, schedule, *, updated_by):
        for i, s in enumerate(self.items):
            if s.schedule_id == schedule.schedule_id:
                self.items[i] = schedule
                return True
        return False

    def delete(self, schedule_id):
        before = len(self.items)
        self.items = [s for s in self.items if s.schedule_id != schedule_id]
        return len(self.items) < before


class InMemoryAttendance:
    def __init__(self, *records: Attendance):
        self.by_id: dict[int, Attendance] = {r.attendance_id: r for r in records}
        self._next_id = max(self.by_id, default=0) + 1

    def add(self, record: Attendance) -> Attendance:
        self.by_id[record.attendance_id] = record
        self._next_id = max(self._next_id, record.attendance_id + 1)
        return record

    def get_by_id(self, attendance_id):
        return self.by_id.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        return next(
            (r for r in self.by_id.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def list_for_employee(self, employee_id, *, start, end):
        items = [r for r in self.by_id.values() if r.employee_id == employee_id and start <= r.work_date <= end]
        return sorted(items, key=lambda r: r.work_date)

    def create_clock_in(self, *, employee_id, work_date, clock_in, status, notes=None):
        existing = self.get_for_employee_and_date(employee_id, work_date)
        if existing is not None:
            if existing.clock_in is not None:
                raise AlreadyClockedInError("Already clocked in today")
            self.by_id[existing.attendance_id] = replace(existing, clock_in=clock_in, status=status, notes=notes)
            return existing.attendance_id

        attendance_id = self._next_id
        self._next_id += 1
        self.by_id[attendance_id] = Attendance(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_out=None,
            status=status,
            notes=notes,
        )
        return attendance_id

    def record_clock_out(self, *, attendance_id, clock_out, work_duration_minutes, notes=None):
        record = self.by_id.get(attendance_id)
        if record is None or record.clock_out is not None:
            return False
        self.by_id[attendance_id] = replace(
            record,
            clock_out=clock_out,
            work_duration_minutes=work_duration_minutes,
            notes=notes,
        )
        return True


def attendance_record(
    attendance_id: int,
    employee_id: int,
    work_date: date,
    clock_in: Optional[datetime] = None,
    clock_out: Optional[datetime] = None,
) -> Attendance:
    return Attendance(
        attendance_id=attendance_id,
        employee_id=employee_id,
        work_date=work_date,
        clock_in=clock_in,
        clock_out=clock_out,
        status=AttendanceStatus.PRESENT,
    )


class InMemoryAdjustments:
    """Mirrors the MySQL store: unique PENDING per attendance, conditional decisions."""

    def __init__(self, attendance: InMemoryAttendance):
        self.attendance = attendance
        self.by_id: dict[int, AttendanceAdjustment] = {}
        self._next_id = 1

    def create_pending(self, *, employee_id, attendance_id, requested_by, clock_in, clock_out, reason, requested_at):
        if self.find_pending_for_attendance(attendance_id):
            raise ConflictError("An adjustment request already exists for this attendance record")
        adjustment_id = self._next_id
        self._next_id += 1
        self.by_id[adjustment_id] = AttendanceAdjustment(
            adjustment_id=adjustment_id,
            employee_id=employee_id,
            attendance_id=attendance_id,
            requested_by=requested_by,
            clock_in=clock_in,
            clock_out=clock_out,
            reason=reason,
            status=ApprovalStatus.PENDING,
            requested_at=requested_at,
        )
        return adjustment_id

    def get(self, adjustment_id):
        return self.by_id.get(int(adjustment_id))

    def find_pending_for_attendance(self, attendance_id):
        return next(
            (a for a in self.by_id.values() if a.attendance_id == attendance_id and a.is_pending),
            None,
        )

    def list_for_employee(self, employee_id, *, status=None, limit=200):
        items = [
            a for a in self.by_id.values() if a.employee_id == employee_id and (status is None or a.status == status)
        ]
        items.sort(key=lambda a: (a.requested_at, a.adjustment_id), reverse=True)
        return items[:limit]

    def list_pending_for_employees(self, employee_ids, *, limit=200, offset=0):
        ids = set(employee_ids)
        items = [a for a in self.by_id.values() if a.is_pending and a.employee_id in ids]
        items.sort(key=lambda a: (a.requested_at, a.adjustment_id))
        return items[offset : offset + limit]

    def update_pending(self, *, adjustment_id, clock_in, clock_out, reason):
        current = self.by_id.get(adjustment_id)
        if current is None or not current.is_pending:
            return False
        self.by_id[adjustment_id] = replace(current, clock_in=clock_in, clock_out=clock_out, reason=reason)
        return True

    def delete_pending(self, adjustment_id):
        current = self.by_id.get(adjustment_id)
        if current is None or not current.is_pending:
            return False
        del self.by_id[adjustment_id]
        return True

    def approve(
        self,
        *,
        adjustment_id,
        approved_by,
        approved_at,
        attendance_id,
        clock_in,
        clock_out,
        work_duration_minutes,
    ):
        current = self.by_id.get(adjustment_id)
        if current is None or not current.is_pending:
            return False
        record = self.attendance.get_by_id(attendance_id)
        if record is None:
            raise NotFoundError("Attendance not found")

        self.by_id[adjustment_id] = replace(
            current,
            status=ApprovalStatus.APPROVED,
            approved_by=approved_by,
            approved_at=approved_at,
        )
        self.attendance.by_id[attendance_id] = replace(
            record,
            clock_in=clock_in if clock_in is not None else record.clock_in,
            clock_out=clock_out if clock_out is not None else record.clock_out,
            work_duration_minutes=(
                work_duration_minutes if work_duration_minutes is not None else record.work_duration_minutes
            ),
            adjustment_id=adjustment_id,
        )
        return True

    def reject(self, *, adjustment_id, decided_by, decided_at, rejected_reason):
        current = self.by_id.get(adjustment_id)
        if current is None or not current.is_pending:
            return False
        self.by_id[adjustment_id] = replace(
            current,
            status=ApprovalStatus.REJECTED,
            approved_by=decided_by,
            approved_at=decided_at,
            rejected_reason=rejected_reason,
        )
        return True


class InMemoryLeaves:
    def __init__(self, *leaves: LeaveRequest, failing_for: tuple[int, ...] = ()):
        self.items = list(leaves)
        self.failing_for = set(failing_for)

    def list_approved_for_employee(self, employee_id, *, start=None, end=None):
        if employee_id in self.failing_for:
            raise RuntimeError("leave service unavailable")
        return [
            lv
            for lv in self.items
            if lv.employee_id == employee_id
            and lv.status == ApprovalStatus.APPROVED
            and (end is None or lv.start_date <= end)
            and (start is None or lv.end_date >= start)
        ]


def approved_leave(leave_id: int, employee_id: int, start: date, end: date, status=ApprovalStatus.APPROVED):
    return LeaveRequest(
        leave_id=leave_id,
        employee_id=employee_id,
        leave_type_id=1,
        start_date=start,
        end_date=end,
        status=status,
        reason="Family event",
    )


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditEntry] = []

    def add(self, entry: AuditEntry) -> int:
        self.entries.append(replace(entry, audit_id=len(self.entries) + 1))
        return len(self.entries)

    def list_for_entity(self, *, entity_type, entity_id, limit=200):
        return [e for e in self.entries if e.entity_type == entity_type and e.entity_id == entity_id][:limit]


class BrokenAudit:
    def add(self, entry):
        raise RuntimeError("audit table is locked")

    def list_for_entity(self, *, entity_type, entity_id, limit=200):
        return []
