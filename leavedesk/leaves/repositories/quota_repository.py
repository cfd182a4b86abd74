# -*- coding: utf-8 -*-
"""
Quota ledger (pure DB) over Employee.annual_leave_quota.

check_and_deduct is a single conditional UPDATE: the balance check and the
decrement happen in one statement, so two concurrent deductions for the same
employee cannot both pass the check. It refuses to run outside an atomic block;
the caller's state write must commit or abort together with it.
"""
from __future__ import annotations
from typing import Optional

from django.db import connection, transaction
from django.db.models import F
from django.utils import timezone

from leaves.exceptions import NotFoundError, QuotaExhausted
from leaves.models import Employee


def get_remaining(employee_id: int) -> Optional[int]:
    return Employee.objects.filter(pk=employee_id).values_list("annual_leave_quota", flat=True).first()


def check_and_deduct(employee_id: int, amount: int) -> int:
    """Deduct `amount` days; returns the remaining balance. Raises QuotaExhausted if short."""
    if not connection.in_atomic_block:
        raise transaction.TransactionManagementError(
            "Quota deduction must share the atomic block of the approval."
        )
    if amount < 0:
        raise ValueError("amount must be >= 0")

    updated = (
        Employee.objects
        .filter(pk=employee_id, annual_leave_quota__gte=amount)
        .update(annual_leave_quota=F("annual_leave_quota") - amount, updated_at=timezone.now())
    )
    if updated:
        return get_remaining(employee_id)

    remaining = get_remaining(employee_id)
    if remaining is None:
        raise NotFoundError(f"Employee {employee_id} not found")
    raise QuotaExhausted(
        f"Insufficient annual leave quota: {remaining} day(s) remaining, {amount} requested"
    )
