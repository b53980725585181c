from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveRequest
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_approved_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["employee_id=%s", "status=%s"]
        params: list[object] = [int(employee_id), ApprovalStatus.APPROVED.value]
        # Overlap test keeps leaves that start before the window but run into it.
        if end is not None:
            clauses.append("start_date<=%s")
            params.append(end)
        if start is not None:
            clauses.append("end_date>=%s")
            params.append(start)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT leave_id, employee_id, leave_type_id, start_date, end_date, status, reason
                FROM leave_requests
                WHERE {' AND '.join(clauses)}
                ORDER BY start_date ASC, leave_id ASC
                """,
                tuple(params),
            )
            return [
                LeaveRequest(
                    leave_id=int(r["leave_id"]),
                    employee_id=int(r["employee_id"]),
                    leave_type_id=int(r["leave_type_id"]) if r.get("leave_type_id") is not None else None,
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    status=ApprovalStatus(r["status"]),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]
