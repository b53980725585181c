from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .adjustments.mysql_adjustment_repository import MySQLAdjustmentRepository
from .adjustments.service import AdjustmentWorkflow
from .attendance.calculator import RoundingPolicy
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.service import AuditTrail
from .calendar_view.service import CalendarService
from .common.datetime_utils import Clock, get_zone
from .core.constants import DEFAULT_ROUNDING_INTERVAL_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import AccessPolicy
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    clock: Clock

    access_policy: AccessPolicy
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    adjustment_workflow: AdjustmentWorkflow
    calendar_service: CalendarService
    audit_trail: AuditTrail

    conn: Optional[DatabaseConnection] = None


def rounding_from_settings(settings: Mapping[str, Any]) -> RoundingPolicy:
    return RoundingPolicy(
        enabled=bool(settings.get("ROUNDING_ENABLED", True)),
        interval_minutes=int(settings.get("ROUNDING_INTERVAL_MINUTES", DEFAULT_ROUNDING_INTERVAL_MINUTES)),
    )


def build_container(*, db_config: dict, settings: Mapping[str, Any] | None = None) -> Container:
    settings = settings or {}
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = Clock(tz=get_zone(settings.get("ORG_TIMEZONE")))
    rounding = rounding_from_settings(settings)

    employees_repo = MySQLEmployeeRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn, clock.tz)
    leaves_repo = MySQLLeaveRepository(conn)
    adjustments_repo = MySQLAdjustmentRepository(conn, clock.tz)
    audit_repo = MySQLAuditRepository(conn, clock.tz)

    access = AccessPolicy(employees_repo)
    audit = AuditTrail(audit_repo, clock=clock)

    return Container(
        clock=clock,
        access_policy=access,
        schedule_service=ScheduleService(schedules_repo, access),
        attendance_service=AttendanceService(attendance_repo, schedules_repo, access, clock=clock, rounding=rounding),
        adjustment_workflow=AdjustmentWorkflow(
            adjustments_repo,
            attendance_repo,
            employees_repo,
            access,
            clock=clock,
            rounding=rounding,
            audit=audit,
        ),
        calendar_service=CalendarService(schedules_repo, attendance_repo, leaves_repo, access, clock=clock),
        audit_trail=audit,
        conn=conn,
    )
