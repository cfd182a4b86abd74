# -*- coding: utf-8 -*-
"""
Selector for LeaveApplication listings:
- Validate + normalize query params (string → date/enum) BEFORE any DB access;
  invalid values raise ValidationError instead of being ignored.
- Three scopes: requester (own), reviewer (division), approver (all).
- total and the page come from the same filtered queryset.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from django.utils.dateparse import parse_date

from leaves.exceptions import NotFoundError, ValidationError
from leaves.models import LeaveApplication
from leaves.repositories import leave_repository as repo
from leaves.utils.pagination import LeavePagination

# public sort key -> ORM field (employee_name / division_name are annotations)
SORT_FIELDS = {
    "issued_at": "issued_at",
    "start_date": "start_date",
    "end_date": "end_date",
    "status": "status",
    "employee_name": "employee_name",
    "division_name": "division_name",
}
DEFAULT_SORT = "issued_at"
ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class LeaveFilters:
    start_from: Optional[date] = None
    start_to: Optional[date] = None
    leave_type: Optional[str] = None
    status: Optional[str] = None
    employee_name: str = ""
    division: str = ""
    sort_by: str = DEFAULT_SORT
    order: str = "asc"
    page: int = 1
    limit: int = 10

    def as_repo_filters(self) -> Dict[str, Any]:
        return {
            "start_from": self.start_from,
            "start_to": self.start_to,
            "leave_type": self.leave_type,
            "status": self.status,
            "employee_name": self.employee_name,
            "division": self.division,
        }

    def order_by(self) -> List[str]:
        prefix = "-" if self.order == "desc" else ""
        return [f"{prefix}{SORT_FIELDS[self.sort_by]}", f"{prefix}id"]


def _str(params: Mapping[str, Any], key: str) -> str:
    return str(params.get(key) or "").strip()

def _as_date(params: Mapping[str, Any], key: str) -> Optional[date]:
    raw = _str(params, key)
    if not raw:
        return None
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ValidationError(f"{key} must be a date in YYYY-MM-DD format, got {raw!r}")
    return value

def _as_choice(params: Mapping[str, Any], key: str, choices) -> Optional[str]:
    raw = _str(params, key)
    if not raw:
        return None
    if raw not in choices:
        raise ValidationError(f"Invalid {key} {raw!r}; expected one of: {', '.join(choices)}")
    return raw


def parse_filters(params: Optional[Mapping[str, Any]]) -> LeaveFilters:
    """Pure function: no query is issued here."""
    params = params or {}
    start_from = _as_date(params, "start_from")
    start_to = _as_date(params, "start_to")
    if start_from and start_to and start_from > start_to:
        raise ValidationError("start_from must be on or before start_to")

    sort_by = _as_choice(params, "sort_by", list(SORT_FIELDS)) or DEFAULT_SORT
    order = (_as_choice(params, "order", list(ORDERS)) or "asc")
    pagination = LeavePagination()

    return LeaveFilters(
        start_from=start_from,
        start_to=start_to,
        leave_type=_as_choice(params, "leave_type", LeaveApplication.LeaveType.values),
        status=_as_choice(params, "status", LeaveApplication.Status.values),
        employee_name=_str(params, "employee_name"),
        division=_str(params, "division"),
        sort_by=sort_by,
        order=order,
        page=pagination.page_number_from(params),
        limit=pagination.page_size_from(params),
    )


def _page(filters: LeaveFilters, scope: Dict[str, Any]) -> LeavePagination:
    qs = repo.filter_applications({**filters.as_repo_filters(), **scope}, order_by=filters.order_by())
    return LeavePagination().paginate(qs, filters.page, filters.limit)


def list_for_requester(employee_id: int, params: Optional[Mapping[str, Any]] = None) -> LeavePagination:
    filters = parse_filters(params)
    return _page(filters, {"employee_id": employee_id})

def list_for_reviewer(division_id: int, params: Optional[Mapping[str, Any]] = None) -> LeavePagination:
    filters = parse_filters(params)
    if division_id is None:
        raise NotFoundError("Employee data is incomplete")
    return _page(filters, {"division_id": division_id})

def list_for_approver(params: Optional[Mapping[str, Any]] = None) -> LeavePagination:
    filters = parse_filters(params)
    return _page(filters, {})
