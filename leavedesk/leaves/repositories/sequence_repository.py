# -*- coding: utf-8 -*-
"""
Repository layer for DocumentSequence (pure DB):
- One counter row per year, read-modify-written under a row lock.
- Must be called inside transaction.atomic() of the caller, so the number is
  only consumed when the caller's insert commits.
"""
from __future__ import annotations

from django.db import IntegrityError, connection, transaction
from django.db.models import Max

from leaves.models import DocumentSequence, LeaveApplication


def _require_atomic() -> None:
    if not connection.in_atomic_block:
        raise transaction.TransactionManagementError(
            "Document numbers can only be allocated inside an atomic block."
        )


def max_issued_number(year: int) -> int:
    agg = LeaveApplication.objects.filter(document_year=year).aggregate(m=Max("document_seq"))
    return int(agg["m"] or 0)


def lock_counter(year: int) -> DocumentSequence:
    """
    SELECT ... FOR UPDATE the year's counter, creating it on first use.
    A new counter starts from the highest number already issued that year.
    """
    _require_atomic()
    counter = DocumentSequence.objects.select_for_update().filter(year=year).first()
    if counter is not None:
        return counter
    try:
        with transaction.atomic():
            DocumentSequence.objects.create(year=year, last_number=max_issued_number(year))
    except IntegrityError:
        # concurrent first allocation of the year created it
        pass
    return DocumentSequence.objects.select_for_update().get(year=year)


def advance(counter: DocumentSequence) -> int:
    """Next number; never below what is already issued (rows inserted around the counter)."""
    _require_atomic()
    counter.last_number = max(counter.last_number, max_issued_number(counter.year)) + 1
    counter.save(update_fields=["last_number", "updated_at"])
    return counter.last_number


@transaction.atomic
def reseed(year: int) -> DocumentSequence:
    counter = lock_counter(year)
    counter.last_number = max_issued_number(year)
    counter.save(update_fields=["last_number", "updated_at"])
    return counter
