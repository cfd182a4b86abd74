# -*- coding: utf-8 -*-
"""
Repository layer for LeaveApplication (pure DB):
- CRUD, filter, select_for_update
- NO business rules (state checks, policy, scope): the service decides.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Iterable
from django.db import transaction
from django.db.models import F, QuerySet

from leaves.models import LeaveApplication


# ============================
# Base queries
# ============================
def base_qs() -> QuerySet[LeaveApplication]:
    return LeaveApplication.objects.select_related(
        "employee", "employee__division", "employee__position", "supporting_document",
    )

def get_or_none(application_id: int) -> Optional[LeaveApplication]:
    return base_qs().filter(id=application_id).first()

def lock(application_id: int) -> Optional[LeaveApplication]:
    """Row-lock the application for a transition; caller must be inside atomic()."""
    return (
        LeaveApplication.objects
        .select_for_update(of=("self",))
        .select_related("employee", "employee__division", "supporting_document")
        .filter(id=application_id)
        .first()
    )

def annotated_qs() -> QuerySet[LeaveApplication]:
    return base_qs().annotate(
        employee_name=F("employee__name"),
        division_name=F("employee__division__name"),
    )

def filter_applications(filters: Dict[str, Any], order_by: Optional[List[str]] = None) -> QuerySet[LeaveApplication]:
    """
    `filters` is already validated/normalized by the selector.
    Scope keys (employee_id, division_id) and user filters share one predicate,
    so a count() on the result always matches the paged rows.
    """
    qs = annotated_qs()
    if (emp_id := filters.get("employee_id")) is not None:
        qs = qs.filter(employee_id=emp_id)
    if (div_id := filters.get("division_id")) is not None:
        qs = qs.filter(employee__division_id=div_id)
    if (s_from := filters.get("start_from")):
        qs = qs.filter(start_date__gte=s_from)
    if (s_to := filters.get("start_to")):
        qs = qs.filter(start_date__lte=s_to)
    if (leave_type := filters.get("leave_type")):
        qs = qs.filter(leave_type=leave_type)
    if (status := filters.get("status")):
        qs = qs.filter(status=status)
    if (name := filters.get("employee_name")):
        qs = qs.filter(employee__name__icontains=name)
    if (division := filters.get("division")):
        qs = qs.filter(employee__division__name__icontains=division)
    return qs.order_by(*order_by) if order_by else qs.order_by("issued_at", "id")


# ============================
# Mutations (pure DB)
# ============================
@transaction.atomic
def create(data: Dict[str, Any]) -> LeaveApplication:
    return LeaveApplication.objects.create(**data)

@transaction.atomic
def save_fields(obj: LeaveApplication, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> LeaveApplication:
    fields: List[str] = []
    for k, v in patch.items():
        if (allowed is None) or (k in allowed):
            setattr(obj, k, v)
            fields.append(k)
    if fields:
        fields.append("updated_at")
        obj.save(update_fields=fields)
    return obj
