from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class LeaveRequest:
    """Leave request as owned by the leave module; read-only here."""

    leave_id: int
    employee_id: int
    leave_type_id: Optional[int]
    start_date: date
    end_date: date
    status: ApprovalStatus
    reason: Optional[str] = None

    def covers(self, work_date: date) -> bool:
        return self.start_date <= work_date <= self.end_date
