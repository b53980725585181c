from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import ApprovalStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import IntegrityError, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceAdjustment
from .repository import AdjustmentRepository

_COLUMNS = (
    "adjustment_id, employee_id, attendance_id, requested_by, clock_in, clock_out, reason, "
    "status, requested_at, approved_by, approved_at, rejected_reason"
)


def _row_to_adjustment(r: dict) -> AttendanceAdjustment:
    return AttendanceAdjustment(
        adjustment_id=int(r["adjustment_id"]),
        employee_id=int(r["employee_id"]),
        attendance_id=int(r["attendance_id"]),
        requested_by=int(r["requested_by"]),
        clock_in=from_utc_naive(r.get("clock_in")),
        clock_out=from_utc_naive(r.get("clock_out")),
        reason=r["reason"],
        status=ApprovalStatus(r["status"]),
        requested_at=from_utc_naive(r["requested_at"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=from_utc_naive(r.get("approved_at")),
        rejected_reason=r.get("rejected_reason"),
    )


class MySQLAdjustmentRepository(AdjustmentRepository):
    """MySQL storage for attendance adjustments.

    PENDING uniqueness relies on the `pending_attendance_id` generated column
    (attendance_id while PENDING, NULL otherwise) carrying a UNIQUE index, so
    two concurrent inserts cannot both succeed. Decisions are conditional
    updates on `status='PENDING'`.
    """

    def __init__(self, conn_factory: DatabaseConnection, tz: ZoneInfo):
        self._conn_factory = conn_factory
        self._tz = tz

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_adjustments(
                        employee_id, attendance_id, requested_by, clock_in, clock_out, reason, status, requested_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        int(attendance_id),
                        int(requested_by),
                        to_utc_naive(clock_in, self._tz),
                        to_utc_naive(clock_out, self._tz),
                        reason,
                        ApprovalStatus.PENDING.value,
                        to_utc_naive(requested_at, self._tz),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError("An adjustment request already exists for this attendance record") from exc
            raise

    def get(self, adjustment_id: int) -> Optional[AttendanceAdjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_adjustments WHERE adjustment_id=%s", (int(adjustment_id),))
            r = fetchone(cur)
            return _row_to_adjustment(r) if r else None

    def find_pending_for_attendance(self, attendance_id: int) -> Optional[AttendanceAdjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_adjustments WHERE pending_attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_adjustment(r) if r else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[ApprovalStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AttendanceAdjustment]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_adjustments
                WHERE {' AND '.join(clauses)}
                ORDER BY requested_at DESC, adjustment_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_adjustment(r) for r in fetchall(cur)]

    def list_pending_for_employees(
        self,
        employee_ids: Sequence[int],
        *,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
    ) -> Sequence[AttendanceAdjustment]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_adjustments
                WHERE status=%s AND employee_id IN ({placeholders})
                ORDER BY requested_at ASC, adjustment_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple([ApprovalStatus.PENDING.value] + ids + [int(limit), int(offset)]),
            )
            return [_row_to_adjustment(r) for r in fetchall(cur)]

    def update_pending(
        self,
        *,
        adjustment_id: int,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
        reason: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_adjustments
                SET clock_in=%s, clock_out=%s, reason=%s
                WHERE adjustment_id=%s AND status=%s
                """,
                (
                    to_utc_naive(clock_in, self._tz),
                    to_utc_naive(clock_out, self._tz),
                    reason,
                    int(adjustment_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_pending(self, adjustment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_adjustments WHERE adjustment_id=%s AND status=%s",
                (int(adjustment_id), ApprovalStatus.PENDING.value),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_adjustments
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE adjustment_id=%s AND status=%s
                """,
                (
                    ApprovalStatus.APPROVED.value,
                    int(approved_by),
                    to_utc_naive(approved_at, self._tz),
                    int(adjustment_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                return False

            cur.execute(
                """
                UPDATE attendance
                SET clock_in=COALESCE(%s, clock_in),
                    clock_out=COALESCE(%s, clock_out),
                    work_duration_minutes=COALESCE(%s, work_duration_minutes),
                    adjustment_id=%s
                WHERE attendance_id=%s
                """,
                (
                    to_utc_naive(clock_in, self._tz),
                    to_utc_naive(clock_out, self._tz),
                    work_duration_minutes,
                    int(adjustment_id),
                    int(attendance_id),
                ),
            )
            if cur.rowcount == 0:
                # Rolls back the status change above.
                raise NotFoundError("Attendance not found")
            return True

    def reject(
        self,
        *,
        adjustment_id: int,
        decided_by: int,
        decided_at: datetime,
        rejected_reason: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_adjustments
                SET status=%s, approved_by=%s, approved_at=%s, rejected_reason=%s
                WHERE adjustment_id=%s AND status=%s
                """,
                (
                    ApprovalStatus.REJECTED.value,
                    int(decided_by),
                    to_utc_naive(decided_at, self._tz),
                    rejected_reason,
                    int(adjustment_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
