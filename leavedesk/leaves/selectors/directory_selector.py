# -*- coding: utf-8 -*-
"""
Employee directory + identity resolution.

Roles follow the organisation chart:
- approver  : admin employee whose position is not "Manager"
- reviewer  : admin employee whose position is "Manager" (scoped to own division)
- requester : everybody else (every employee can also submit)
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from django.db.models import Q

from leaves.exceptions import NotFoundError
from leaves.models import Employee
from leaves.models.core import MANAGER_POSITION_NAME

ROLE_REQUESTER = "requester"
ROLE_REVIEWER = "reviewer"
ROLE_APPROVER = "approver"


@dataclass(frozen=True)
class Actor:
    employee_id: int
    division_id: Optional[int]
    role: str

    @property
    def is_reviewer(self) -> bool:
        return self.role == ROLE_REVIEWER

    @property
    def is_approver(self) -> bool:
        return self.role == ROLE_APPROVER


def _manager_q(prefix: str = "") -> Q:
    return Q(**{f"{prefix}position__name__iexact": MANAGER_POSITION_NAME})


def role_of(employee: Employee) -> str:
    if employee.role != Employee.Role.ADMIN:
        return ROLE_REQUESTER
    if employee.position is not None and employee.position.is_manager:
        return ROLE_REVIEWER
    return ROLE_APPROVER


def get_employee(employee_id: int) -> Optional[Employee]:
    return Employee.objects.select_related("division", "position").filter(pk=employee_id).first()


def actor_for_employee(employee: Employee) -> Actor:
    return Actor(employee_id=employee.pk, division_id=employee.division_id, role=role_of(employee))


def resolve_actor(user) -> Actor:
    """Map an authenticated Django user to {employee_id, division_id, role}."""
    employee = (
        Employee.objects.select_related("division", "position").filter(user_id=getattr(user, "pk", None)).first()
        if user is not None and getattr(user, "is_authenticated", False) else None
    )
    if employee is None:
        raise NotFoundError("Employee data is incomplete")
    return actor_for_employee(employee)


# ========= Audience resolution (notification dispatcher) =========

def employee_email(employee_id: int) -> Optional[str]:
    mail = Employee.objects.filter(pk=employee_id).values_list("email", flat=True).first()
    mail = (mail or "").strip()
    return mail or None


def division_reviewer_emails(division_id: int) -> List[str]:
    qs = (
        Employee.objects
        .filter(role=Employee.Role.ADMIN, division_id=division_id)
        .filter(_manager_q())
        .values_list("email", flat=True)
    )
    return list(dict.fromkeys(m for m in qs if m))


def approver_emails() -> List[str]:
    qs = (
        Employee.objects
        .filter(role=Employee.Role.ADMIN)
        .exclude(_manager_q())
        .values_list("email", flat=True)
    )
    return list(dict.fromkeys(m for m in qs if m))
