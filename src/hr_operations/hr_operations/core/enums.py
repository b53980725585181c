from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role used for access decisions."""

    OWNER = "OWNER"
    MANAGER = "MANAGER"
    STOCK_MANAGER = "STOCK_MANAGER"
    SUPERVISOR = "SUPERVISOR"
    EMPLOYEE = "EMPLOYEE"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"
    ON_LEAVE = "ON_LEAVE"


class AttendanceStatus(str, Enum):
    """Attendance status as stored by the backend (opaque to day views)."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"
    ON_LEAVE = "ON_LEAVE"


class ApprovalStatus(str, Enum):
    """Approval flow state shared by adjustments and leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DayStatus(str, Enum):
    """Derived, presentation-independent classification of one day."""

    ON_LEAVE = "ON_LEAVE"
    COMPLETED = "COMPLETED"
    IN_PROGRESS = "IN_PROGRESS"
    SCHEDULED = "SCHEDULED"
    UNSCHEDULED = "UNSCHEDULED"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
