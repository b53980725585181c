from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.service import AccessPolicy
from .model import ShiftSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewShiftSchedule:
    employee_id: int
    start_time: str
    end_time: str
    day_of_week: Optional[int] = None
    work_date: Optional[date] = None
    is_active: bool = True
    notes: Optional[str] = None


class ScheduleService:
    """Write boundary for shift schedules.

    Malformed schedules never reach the resolver: the recurring/date-specific
    split and time formats are checked here, and one employee can hold at most
    one schedule per weekday (recurring) and one per date (date-specific).
    """

    def __init__(self, schedules: ScheduleRepository, access: AccessPolicy):
        self._schedules = schedules
        self._access = access

    @staticmethod
    def _validate(day_of_week: Optional[int], work_date: Optional[date], start_time: str, end_time: str) -> None:
        if day_of_week is None and work_date is None:
            raise ValidationError("Either day_of_week (recurring) or date (specific date) must be provided")
        if day_of_week is not None and work_date is not None:
            raise ValidationError("Cannot specify both day_of_week and date")
        if day_of_week is not None and not 0 <= int(day_of_week) <= 6:
            raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
        parse_hhmm(start_time, "start_time")
        parse_hhmm(end_time, "end_time")

    def _ensure_free_slot(self, schedule: ShiftSchedule, *, exclude_id: Optional[int] = None) -> None:
        clash = self._schedules.find_conflict(
            employee_id=schedule.employee_id,
            day_of_week=schedule.day_of_week,
            work_date=schedule.work_date,
            exclude_id=exclude_id,
        )
        if clash:
            if schedule.work_date is not None:
                raise ConflictError("Shift schedule already exists for this employee on this date")
            raise ConflictError("Shift schedule already exists for this employee on this day of week")

    def _authorize(self, actor_id: int, employee_id: int):
        actor = self._access.get_actor(actor_id)
        employee = self._access.require_visible(actor, employee_id)
        if not self._access.can_manage_schedules(actor, employee):
            raise AuthorizationError("Only managers and owners can manage shift schedules")
        return actor

    def _get(self, schedule_id: int) -> ShiftSchedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError("Shift schedule not found")
        return schedule

    def create(self, *, actor_id: int, data: NewShiftSchedule) -> ShiftSchedule:
        actor = self._authorize(actor_id, data.employee_id)
        self._validate(data.day_of_week, data.work_date, data.start_time, data.end_time)

        draft = ShiftSchedule(
            schedule_id=0,
            employee_id=int(data.employee_id),
            day_of_week=int(data.day_of_week) if data.day_of_week is not None else None,
            work_date=data.work_date,
            start_time=data.start_time.strip(),
            end_time=data.end_time.strip(),
            is_active=bool(data.is_active),
            notes=(data.notes or "").strip() or None,
        )
        self._ensure_free_slot(draft)

        schedule_id = self._schedules.create(
            employee_id=draft.employee_id,
            day_of_week=draft.day_of_week,
            work_date=draft.work_date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            is_active=draft.is_active,
            notes=draft.notes,
            created_by=actor.employee_id,
        )
        logger.info("Shift schedule %s created for employee %s by %s", schedule_id, draft.employee_id, actor.employee_id)
        return replace(draft, schedule_id=schedule_id)

    def update(
        self,
        *,
        actor_id: int,
        schedule_id: int,
        day_of_week: Optional[int] = None,
        work_date: Optional[date] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        is_active: Optional[bool] = None,
        notes: Optional[str] = None,
    ) -> ShiftSchedule:
        current = self._get(schedule_id)
        actor = self._authorize(actor_id, current.employee_id)

        if day_of_week is not None and work_date is not None:
            raise ValidationError("Cannot specify both day_of_week and date")

        updated = current
        if day_of_week is not None:
            updated = replace(updated, day_of_week=int(day_of_week), work_date=None)
        if work_date is not None:
            updated = replace(updated, work_date=work_date, day_of_week=None)
        if start_time is not None:
            updated = replace(updated, start_time=start_time.strip())
        if end_time is not None:
            updated = replace(updated, end_time=end_time.strip())
        if is_active is not None:
            updated = replace(updated, is_active=bool(is_active))
        if notes is not None:
            updated = replace(updated, notes=notes.strip() or None)

        self._validate(updated.day_of_week, updated.work_date, updated.start_time, updated.end_time)
        if (updated.day_of_week, updated.work_date) != (current.day_of_week, current.work_date):
            self._ensure_free_slot(updated, exclude_id=current.schedule_id)

        if not self._schedules.update(updated, updated_by=actor.employee_id):
            raise NotFoundError("Shift schedule not found")
        logger.info("Shift schedule %s updated by %s", current.schedule_id, actor.employee_id)
        return updated

    def delete(self, *, actor_id: int, schedule_id: int) -> ShiftSchedule:
        current = self._get(schedule_id)
        actor = self._authorize(actor_id, current.employee_id)

        if not self._schedules.delete(current.schedule_id):
            raise NotFoundError("Shift schedule not found")
        logger.info("Shift schedule %s deleted by %s", current.schedule_id, actor.employee_id)
        return current

    def list_for_employee(
        self,
        *,
        actor_id: int,
        employee_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[ShiftSchedule]:
        actor = self._access.get_actor(actor_id)
        employee = self._access.require_visible(actor, employee_id)
        return self._schedules.list_for_employee(employee.employee_id, start=start, end=end, active_only=False)
