from __future__ import annotations

from typing import Optional

from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Employee
from .repository import EmployeeRepository

SELF_ONLY_ROLES = frozenset({Role.EMPLOYEE, Role.SUPERVISOR, Role.STOCK_MANAGER})


class AccessPolicy:
    """Single place for role and reporting-line checks.

    Every service asks this policy instead of comparing role strings itself:

    * EMPLOYEE / SUPERVISOR / STOCK_MANAGER see and act only for themselves.
    * MANAGER additionally sees and acts for active direct reports.
    * OWNER sees and acts for every active employee.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get_actor(self, actor_id: int) -> Employee:
        actor = self._employees.get_by_id(int(actor_id))
        if not actor:
            raise NotFoundError("Employee not found")
        if not actor.is_active:
            raise AuthorizationError("Inactive employees cannot perform this action")
        return actor

    def visible_employees(self, actor: Employee) -> list[Employee]:
        if actor.role == Role.OWNER:
            return list(self._employees.list_by_status(EmployeeStatus.ACTIVE))

        if actor.role == Role.MANAGER:
            reports = self._employees.list_direct_reports(actor.employee_id, status=EmployeeStatus.ACTIVE)
            return [actor] + [e for e in reports if e.employee_id != actor.employee_id]

        return [actor]

    def can_access(self, actor: Employee, employee: Employee) -> bool:
        """Same rule as `visible_employees`, evaluated for one employee."""
        if actor.employee_id == employee.employee_id:
            return True
        if not employee.is_active:
            return False
        if actor.role == Role.OWNER:
            return True
        if actor.role == Role.MANAGER:
            return employee.manager_id == actor.employee_id
        return False

    def require_visible(self, actor: Employee, employee_id: int) -> Employee:
        """Load an employee the actor may see; invisible looks the same as missing."""
        if actor.employee_id == int(employee_id):
            return actor

        employee = self._employees.get_by_id(int(employee_id))
        if not employee or not self.can_access(actor, employee):
            raise NotFoundError("Employee not found")
        return employee

    def can_manage_on_behalf(self, actor: Employee, owner: Employee) -> bool:
        """Manager/owner acting for someone else's record (edit/delete)."""
        if actor.role not in (Role.MANAGER, Role.OWNER):
            return False
        return self.can_access(actor, owner)

    def can_decide(self, approver: Employee, requester: Optional[Employee], owner: Employee) -> bool:
        """Whether `approver` may approve/reject a request.

        Nobody decides their own request. Manager-requested adjustments need an
        OWNER; otherwise the owner's manager (or an OWNER) decides.
        """
        if requester is not None and approver.employee_id == requester.employee_id:
            return False
        if approver.employee_id == owner.employee_id:
            return False

        if approver.role == Role.OWNER:
            return True

        if approver.role == Role.MANAGER:
            if requester is not None and requester.role == Role.MANAGER:
                return False
            return owner.manager_id == approver.employee_id

        return False

    def can_manage_schedules(self, actor: Employee, employee: Employee) -> bool:
        if actor.role in SELF_ONLY_ROLES:
            return False
        return self.can_access(actor, employee)
