from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Optional, Sequence

from ..attendance.calculator import RoundingPolicy, calculate_work_duration
from ..attendance.model import Attendance
from ..attendance.repository import AttendanceRepository
from ..audit.service import AuditTrail
from ..common.datetime_utils import Clock, ensure_aware
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, MIN_ADJUSTMENT_REASON_LENGTH
from ..core.enums import AuditAction
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import AccessPolicy
from .model import AttendanceAdjustment
from .repository import AdjustmentRepository

logger = logging.getLogger(__name__)

ENTITY_TYPE = "AttendanceAdjustment"


def _snapshot(adjustment: AttendanceAdjustment) -> dict[str, Any]:
    return asdict(adjustment)


def _check_order(clock_in: Optional[datetime], clock_out: Optional[datetime]) -> None:
    if clock_in is not None and clock_out is not None and clock_out < clock_in:
        raise ValidationError("clock_out cannot be earlier than clock_in")


class AdjustmentWorkflow:
    """Request / edit / delete / approve / reject lifecycle of attendance corrections.

    PENDING is the only mutable state; APPROVED and REJECTED are terminal. The
    store guarantees at most one PENDING adjustment per attendance record and
    turns a lost decision race into a no-op, which surfaces here as
    InvalidStateError.

    Callers must refresh any cached day views for the affected employee after
    a committed transition.
    """

    def __init__(
        self,
        adjustments: AdjustmentRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        access: AccessPolicy,
        *,
        clock: Clock,
        rounding: RoundingPolicy | None = None,
        audit: AuditTrail | None = None,
    ):
        self._adjustments = adjustments
        self._attendance = attendance
        self._employees = employees
        self._access = access
        self._clock = clock
        self._rounding = rounding or RoundingPolicy()
        self._audit = audit

    def _aware(self, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(value, self._clock.tz) if value is not None else None

    def _get(self, adjustment_id: int) -> AttendanceAdjustment:
        adjustment = self._adjustments.get(int(adjustment_id))
        if not adjustment:
            raise NotFoundError("Adjustment not found")
        return adjustment

    def _get_attendance(self, attendance_id: int) -> Attendance:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance not found")
        return record

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _require_pending(adjustment: AttendanceAdjustment, action: str) -> None:
        if not adjustment.is_pending:
            raise InvalidStateError(f"Cannot {action} adjustment with status {adjustment.status.value}")

    def _require_editor(self, actor: Employee, adjustment: AttendanceAdjustment) -> None:
        if actor.employee_id == adjustment.requested_by:
            return
        owner = self._employees.get_by_id(adjustment.employee_id)
        if owner is None or not self._access.can_manage_on_behalf(actor, owner):
            raise AuthorizationError("Only the requester or their manager can modify this adjustment")

    def _require_decider(self, approver: Employee, adjustment: AttendanceAdjustment) -> None:
        owner = self._get_employee(adjustment.employee_id)
        requester = self._employees.get_by_id(adjustment.requested_by)
        if not self._access.can_decide(approver, requester, owner):
            raise AuthorizationError("You are not allowed to approve or reject this adjustment")

    def _audit_event(self, action: AuditAction, adjustment_id: int, actor_id: int, **kwargs) -> None:
        if self._audit is not None:
            self._audit.record(action, ENTITY_TYPE, adjustment_id, actor_id, **kwargs)

    def get(self, *, actor_id: int, adjustment_id: int) -> AttendanceAdjustment:
        actor = self._access.get_actor(actor_id)
        adjustment = self._get(adjustment_id)
        self._access.require_visible(actor, adjustment.employee_id)
        return adjustment

    def create(
        self,
        *,
        actor_id: int,
        attendance_id: int,
        clock_in: Optional[datetime] = None,
        clock_out: Optional[datetime] = None,
        reason: str,
    ) -> AttendanceAdjustment:
        actor = self._access.get_actor(actor_id)
        reason = require_min_length(reason, "reason", MIN_ADJUSTMENT_REASON_LENGTH)
        clock_in, clock_out = self._aware(clock_in), self._aware(clock_out)
        if clock_in is None and clock_out is None:
            raise ValidationError("At least one of clock_in or clock_out must be provided")

        record = self._get_attendance(attendance_id)
        owner = self._access.require_visible(actor, record.employee_id)
        if actor.employee_id != owner.employee_id and not self._access.can_manage_on_behalf(actor, owner):
            raise AuthorizationError("You cannot request adjustments for this employee")

        _check_order(clock_in or record.clock_in, clock_out or record.clock_out)

        if self._adjustments.find_pending_for_attendance(record.attendance_id):
            raise ConflictError("A pending adjustment already exists for this attendance record")

        adjustment_id = self._adjustments.create_pending(
            employee_id=owner.employee_id,
            attendance_id=record.attendance_id,
            requested_by=actor.employee_id,
            clock_in=clock_in,
            clock_out=clock_out,
            reason=reason,
            requested_at=self._clock.now(),
        )
        created = self._get(adjustment_id)
        logger.info(
            "Adjustment %s requested for attendance %s by %s",
            adjustment_id,
            record.attendance_id,
            actor.employee_id,
        )
        self._audit_event(AuditAction.CREATE, adjustment_id, actor.employee_id, after=_snapshot(created))
        return created

    def update(
        self,
        *,
        actor_id: int,
        adjustment_id: int,
        clock_in: Optional[datetime] = None,
        clock_out: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> AttendanceAdjustment:
        actor = self._access.get_actor(actor_id)
        current = self._get(adjustment_id)
        self._require_pending(current, "edit")
        self._require_editor(actor, current)

        new_reason = current.reason
        if reason is not None:
            new_reason = require_min_length(reason, "reason", MIN_ADJUSTMENT_REASON_LENGTH)
        new_in = self._aware(clock_in) if clock_in is not None else current.clock_in
        new_out = self._aware(clock_out) if clock_out is not None else current.clock_out

        record = self._get_attendance(current.attendance_id)
        _check_order(new_in or record.clock_in, new_out or record.clock_out)

        if not self._adjustments.update_pending(
            adjustment_id=current.adjustment_id,
            clock_in=new_in,
            clock_out=new_out,
            reason=new_reason,
        ):
            raise InvalidStateError("Adjustment is no longer pending")

        updated = self._get(current.adjustment_id)
        logger.info("Adjustment %s updated by %s", current.adjustment_id, actor.employee_id)
        self._audit_event(
            AuditAction.UPDATE,
            current.adjustment_id,
            actor.employee_id,
            before=_snapshot(current),
            after=_snapshot(updated),
        )
        return updated

    def delete(self, *, actor_id: int, adjustment_id: int) -> AttendanceAdjustment:
        actor = self._access.get_actor(actor_id)
        current = self._get(adjustment_id)
        self._require_pending(current, "delete")
        self._require_editor(actor, current)

        if not self._adjustments.delete_pending(current.adjustment_id):
            raise InvalidStateError("Adjustment is no longer pending")

        logger.info("Adjustment %s deleted by %s", current.adjustment_id, actor.employee_id)
        self._audit_event(AuditAction.DELETE, current.adjustment_id, actor.employee_id, before=_snapshot(current))
        return current

    def approve(self, *, approver_id: int, adjustment_id: int) -> AttendanceAdjustment:
        approver = self._access.get_actor(approver_id)
        current = self._get(adjustment_id)
        self._require_pending(current, "approve")
        self._require_decider(approver, current)

        record = self._get_attendance(current.attendance_id)
        # The record may have changed since the request was filed.
        _check_order(current.clock_in or record.clock_in, current.clock_out or record.clock_out)
        duration = calculate_work_duration(
            current.clock_in or record.clock_in,
            current.clock_out or record.clock_out,
            self._rounding,
        )
        applied = self._adjustments.approve(
            adjustment_id=current.adjustment_id,
            approved_by=approver.employee_id,
            approved_at=self._clock.now(),
            attendance_id=record.attendance_id,
            clock_in=current.clock_in,
            clock_out=current.clock_out,
            work_duration_minutes=duration,
        )
        if not applied:
            raise InvalidStateError("Adjustment is no longer pending")

        approved = self._get(current.adjustment_id)
        logger.info(
            "Adjustment %s approved by %s; attendance %s corrected",
            current.adjustment_id,
            approver.employee_id,
            record.attendance_id,
        )
        self._audit_event(
            AuditAction.APPROVE,
            current.adjustment_id,
            approver.employee_id,
            before=_snapshot(current),
            after=_snapshot(approved),
        )
        return approved

    def reject(self, *, approver_id: int, adjustment_id: int, rejected_reason: str) -> AttendanceAdjustment:
        approver = self._access.get_actor(approver_id)
        current = self._get(adjustment_id)
        self._require_pending(current, "reject")
        self._require_decider(approver, current)
        rejected_reason = require_non_empty(rejected_reason, "rejected_reason")

        if not self._adjustments.reject(
            adjustment_id=current.adjustment_id,
            decided_by=approver.employee_id,
            decided_at=self._clock.now(),
            rejected_reason=rejected_reason,
        ):
            raise InvalidStateError("Adjustment is no longer pending")

        rejected = self._get(current.adjustment_id)
        logger.info("Adjustment %s rejected by %s", current.adjustment_id, approver.employee_id)
        self._audit_event(
            AuditAction.REJECT,
            current.adjustment_id,
            approver.employee_id,
            before=_snapshot(current),
            after=_snapshot(rejected),
            reason=rejected_reason,
        )
        return rejected

    def list_for_employee(
        self,
        *,
        actor_id: int,
        employee_id: int,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AttendanceAdjustment]:
        actor = self._access.get_actor(actor_id)
        employee = self._access.require_visible(actor, employee_id)
        return self._adjustments.list_for_employee(employee.employee_id, limit=limit)

    def list_pending_for_approver(
        self,
        *,
        approver_id: int,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[AttendanceAdjustment]:
        approver = self._access.get_actor(approver_id)
        team = {e.employee_id: e for e in self._access.visible_employees(approver) if e.employee_id != approver.employee_id}
        if not team:
            return []

        requesters: dict[int, Optional[Employee]] = {}
        decidable: list[AttendanceAdjustment] = []
        offset = 0
        # Page until `limit` decidable rows are found.
        while len(decidable) < limit:
            page = self._adjustments.list_pending_for_employees(list(team), limit=limit, offset=offset)
            for adjustment in page:
                if adjustment.requested_by not in requesters:
                    requesters[adjustment.requested_by] = team.get(
                        adjustment.requested_by
                    ) or self._employees.get_by_id(adjustment.requested_by)
                owner = team[adjustment.employee_id]
                if self._access.can_decide(approver, requesters[adjustment.requested_by], owner):
                    decidable.append(adjustment)
            if len(page) < limit:
                break
            offset += limit
        return decidable[:limit]
