from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import ApprovalStatus
from .model import AttendanceAdjustment


class AdjustmentRepository(Protocol):
    def create_pending(
        self,
        *,
        employee_id: int,
        attendance_id: int,
        requested_by: int,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
        reason: str,
        requested_at: datetime,
    ) -> int:
        """Insert a PENDING adjustment.

        Must be atomic with respect to other inserts for the same attendance:
        raises ConflictError when a PENDING one already exists.
        """

        raise NotImplementedError

    def get(self, adjustment_id: int) -> Optional[AttendanceAdjustment]:
        raise NotImplementedError

    def find_pending_for_attendance(self, attendance_id: int) -> Optional[AttendanceAdjustment]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[ApprovalStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AttendanceAdjustment]:
        """Newest first."""

        raise NotImplementedError

    def list_pending_for_employees(
        self,
        employee_ids: Sequence[int],
        *,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
    ) -> Sequence[AttendanceAdjustment]:
        raise NotImplementedError

    def update_pending(
        self,
        *,
        adjustment_id: int,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
        reason: str,
    ) -> bool:
        """False when the row is gone or no longer PENDING."""

        raise NotImplementedError

    def delete_pending(self, adjustment_id: int) -> bool:
        raise NotImplementedError

    def approve(
        self,
        *,
        adjustment_id: int,
        approved_by: int,
        approved_at: datetime,
        attendance_id: int,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
        work_duration_minutes: Optional[int],
    ) -> bool:
        """PENDING -> APPROVED and apply the correction, in one transaction.

        None values leave the attendance field unchanged. Returns False if the
        adjustment was no longer PENDING (nothing is written then).
        """

        raise NotImplementedError

    def reject(
        self,
        *,
        adjustment_id: int,
        decided_by: int,
        decided_at: datetime,
        rejected_reason: str,
    ) -> bool:
        raise NotImplementedError
