# -*- coding: utf-8 -*-
"""
Document number allocator.

- Year scope = calendar year of timezone.localtime() (settings.TIME_ZONE).
- The counter row is locked and advanced inside the caller's atomic block:
  the number is consumed only if the caller's insert commits too.
- Formatting "NNN/YYYY" is presentation only; year + seq are stored raw.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import logging

from django.conf import settings
from django.db import DatabaseError
from django.db.transaction import TransactionManagementError
from django.utils import timezone

from leaves.exceptions import AllocationFailure
from leaves.repositories import sequence_repository as repo

logger = logging.getLogger(__name__)


def _pad() -> int:
    return int(settings.LEAVE_WORKFLOW.get("DOCUMENT_NUMBER_PAD", 3))


def format_document_number(seq: int, year: int) -> str:
    return f"{str(seq).zfill(_pad())}/{year}"


def current_year(now: Optional[datetime] = None) -> int:
    return timezone.localtime(now or timezone.now()).year


@dataclass(frozen=True)
class DocumentNumber:
    year: int
    seq: int
    issued_at: datetime

    @property
    def text(self) -> str:
        return format_document_number(self.seq, self.year)

    def __str__(self) -> str:
        return self.text


def next_number(*, now: Optional[datetime] = None) -> DocumentNumber:
    """
    Allocate the next number of the current year. Caller must hold an atomic block.
    Storage-level conflicts surface as AllocationFailure; the caller's block must then roll back.
    """
    year = current_year(now)
    try:
        counter = repo.lock_counter(year)
        # stamped under the lock so issued_at follows number order
        issued_at = now or timezone.now()
        if current_year(issued_at) != year:
            raise AllocationFailure(f"Year rolled over while allocating for {year}")
        seq = repo.advance(counter)
    except TransactionManagementError:
        # misuse, not a storage conflict
        raise
    except DatabaseError as ex:
        logger.warning("[sequence] allocation for %s failed: %s", year, ex)
        raise AllocationFailure(f"Could not allocate a document number for {year}") from ex
    return DocumentNumber(year=year, seq=seq, issued_at=issued_at)


def reseed(year: Optional[int] = None) -> int:
    """Align the year's counter with the highest number actually issued. Returns the new value."""
    year = year or current_year()
    counter = repo.reseed(year)
    logger.info("[sequence] counter %s reseeded to %s", year, counter.last_number)
    return counter.last_number
