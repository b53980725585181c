from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class AttendanceAdjustment:
    """Proposed correction of an attendance record's punches.

    `employee_id` is the attendance owner, `requested_by` whoever filed it
    (the owner, or their manager acting on their behalf). A None clock value
    means "no change requested" for that punch.
    """

    adjustment_id: int
    employee_id: int
    attendance_id: int
    requested_by: int
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    reason: str
    status: ApprovalStatus
    requested_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ApprovalStatus.PENDING
