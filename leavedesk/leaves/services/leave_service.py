# -*- coding: utf-8 -*-
"""
Service for LeaveApplication (workflow engine):
- submit / review / approve / decline; every transition is one atomic unit
  (row lock + state write + audit [+ quota deduction on approval]).
- Policy (leave-type ceilings, physician letter, annual allowance) lives here.
- Notifications are queued with transaction.on_commit: they only go out after
  the transition has committed and their failure never reaches the caller.
- DB access goes through the repositories (pure DB).
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional, Dict, Any
import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.db import IntegrityError, OperationalError, transaction
from django.utils import timezone

from leaves.exceptions import AllocationFailure, NotFoundError, ValidationError
from leaves.models import Employee, LeaveApplication, SupportingDocument
from leaves.models.leave import LEAVE_DAY_CEILINGS, QUOTA_BEARING_TYPE
from leaves.repositories import leave_repository as repo
from leaves.repositories import quota_repository as quota
from leaves.selectors import directory_selector as directory
from leaves.services import sequence_service
from leaves.services.audit_service import log_action
from leaves.services.notification_service import Audience, dispatch_on_commit
from leaves.services.transitions import Action, next_state

logger = logging.getLogger(__name__)

OBJECT_TYPE = "leave_application"
REVIEW_DECISIONS = {"reviewed": Action.REVIEW, "rejected": Action.REJECT}


# ====== Lookups ======
def _require_employee(employee_id: int) -> Employee:
    emp = directory.get_employee(employee_id)
    if emp is None:
        raise NotFoundError(f"Employee {employee_id} not found")
    return emp

def _require_role(employee_id: int, role: str) -> Employee:
    emp = _require_employee(employee_id)
    if directory.role_of(emp) != role:
        raise PermissionDenied(f"Employee {employee_id} is not a leave {role}.")
    return emp

def _lock_application(application_id: int) -> LeaveApplication:
    obj = repo.lock(application_id)
    if obj is None:
        raise NotFoundError(f"Leave application {application_id} not found")
    return obj

def _snapshot(obj: LeaveApplication) -> Dict[str, Any]:
    return {"status": obj.status, "document_number": obj.document_number, "day_length": obj.day_length}


# ====== Policy ======
def day_length_of(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days of the period."""
    if not isinstance(start_date, date) or not isinstance(end_date, date):
        raise ValidationError("start_date and end_date must be dates")
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")
    return (end_date - start_date).days + 1

def validate_policy(
    *, employee_id: int, leave_type: str, day_length: int, has_document: bool,
) -> None:
    """Leave-type rules shared by submit and review. Raises ValidationError."""
    if leave_type not in LeaveApplication.LeaveType.values:
        raise ValidationError(f"Invalid leave type: {leave_type!r}")
    label = LeaveApplication.LeaveType(leave_type).label

    ceiling = LEAVE_DAY_CEILINGS.get(leave_type)
    if ceiling is not None and day_length > ceiling:
        raise ValidationError(f"{label} exceeds {ceiling} days")

    if leave_type == LeaveApplication.LeaveType.SICK and not has_document:
        raise ValidationError("Sick leave requires a physician letter")

    if leave_type == QUOTA_BEARING_TYPE:
        remaining = quota.get_remaining(employee_id)
        if remaining is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        if day_length > remaining:
            raise ValidationError(
                f"{label} of {day_length} day(s) exceeds the remaining allowance of {remaining} day(s)"
            )


# ====== Notify helpers ======
def _period(obj: LeaveApplication) -> str:
    return f"{obj.start_date} → {obj.end_date} ({obj.day_length} day(s))"

def _notify(obj: LeaveApplication, audience: Audience, event: str, headline: str, extra: str = "") -> None:
    text = (
        f"{headline}\n\n"
        f"Document: {obj.document_number}\n"
        f"Employee: {obj.employee.name} (#{obj.employee_id})\n"
        f"Type: {obj.get_leave_type_display()}\n"
        f"Period: {_period(obj)}\n"
        f"Reason: {obj.reason or '-'}\n"
    )
    if extra:
        text += extra + "\n"
    dispatch_on_commit(
        audience=audience,
        subject=f"Leave {obj.document_number} {event}",
        text=text,
        object_type=OBJECT_TYPE,
        object_id=str(obj.pk),
        event=event,
    )


# ====== Business services ======
def submit(
    *,
    employee_id: int,
    start_date: date,
    end_date: date,
    leave_type: str,
    reason: str,
    description: str,
    supporting_document_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> LeaveApplication:
    """
    Create a pending application with a fresh document number.
    Validation runs before the allocator is touched; number + insert share one
    atomic block, so a failed submission never consumes a number.
    """
    employee = _require_employee(employee_id)
    if employee.division_id is None:
        raise NotFoundError("Employee data is incomplete")
    if not (reason or "").strip() or not (description or "").strip():
        raise ValidationError("reason and description are required")

    # only the submitter's own uploads can be attached
    if supporting_document_id is not None and not SupportingDocument.objects.filter(
        pk=supporting_document_id, uploaded_by_id=employee_id,
    ).exists():
        raise NotFoundError(f"Supporting document {supporting_document_id} not found")

    day_length = day_length_of(start_date, end_date)
    validate_policy(
        employee_id=employee_id, leave_type=leave_type, day_length=day_length,
        has_document=supporting_document_id is not None,
    )

    attempts = max(1, int(settings.LEAVE_WORKFLOW.get("ALLOCATION_ATTEMPTS", 5)))
    last_error: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                number = sequence_service.next_number(now=now)
                obj = repo.create({
                    "employee": employee,
                    "document_number": number.text,
                    "document_year": number.year,
                    "document_seq": number.seq,
                    "issued_at": number.issued_at,
                    "start_date": start_date,
                    "end_date": end_date,
                    "day_length": day_length,
                    "leave_type": leave_type,
                    "reason": reason,
                    "description": description,
                    "supporting_document_id": supporting_document_id,
                    "status": LeaveApplication.Status.PENDING,
                })
                log_action(actor=employee_id, action="submit", object_type=OBJECT_TYPE,
                           object_id=obj.pk, after=_snapshot(obj))
                _notify(obj, Audience.division_reviewers(employee.division_id), "submitted",
                        f"New leave application from {employee.name} is waiting for review.")
        except (AllocationFailure, IntegrityError, OperationalError) as ex:
            last_error = ex
            logger.warning("[leave] submit emp#%s: allocation attempt %s/%s failed: %s",
                           employee_id, attempt, attempts, ex)
            continue
        logger.info("[leave] %s submitted by emp#%s (%s, %s day(s))",
                    obj.document_number, employee_id, leave_type, day_length)
        return obj

    raise AllocationFailure(f"Failed to allocate a document number after {attempts} attempt(s)") from last_error


def review(
    *, application_id: int, reviewer_id: int, decision: str, notes: str = "",
) -> LeaveApplication:
    """Reviewer decision on a pending application: 'reviewed' (endorse) or 'rejected'."""
    action = REVIEW_DECISIONS.get(decision)
    if action is None:
        raise ValidationError(f"decision must be one of {sorted(REVIEW_DECISIONS)}")
    reviewer = _require_role(reviewer_id, directory.ROLE_REVIEWER)

    with transaction.atomic():
        obj = _lock_application(application_id)
        if obj.employee.division_id != reviewer.division_id:
            raise PermissionDenied("Application belongs to another division.")
        target = next_state(obj.status, action)
        before = _snapshot(obj)
        now = timezone.now()

        # review record is set on both outcomes; a rejection also gets its own record
        patch = {"status": target, "reviewed_by_id": reviewer_id, "reviewed_at": now, "review_notes": notes or ""}
        if action == Action.REVIEW:
            validate_policy(
                employee_id=obj.employee_id, leave_type=obj.leave_type, day_length=obj.day_length,
                has_document=obj.supporting_document_id is not None,
            )
        else:
            patch.update({"rejected_by_id": reviewer_id, "rejected_at": now, "rejection_reason": notes or ""})

        repo.save_fields(obj, patch)
        log_action(actor=reviewer_id, action=action.value, object_type=OBJECT_TYPE,
                   object_id=obj.pk, before=before, after=_snapshot(obj))

        if action == Action.REVIEW:
            _notify(obj, Audience.approvers(), "reviewed",
                    f"Leave application reviewed by {reviewer.name}; waiting for approval.")
        else:
            _notify(obj, Audience.requester(obj.employee_id), "rejected",
                    f"Your leave application was rejected by {reviewer.name}.",
                    extra=f"Notes: {notes}" if notes else "")

    logger.info("[leave] %s %s by reviewer emp#%s", obj.document_number, target, reviewer_id)
    return obj


def approve(
    *, application_id: int, approver_id: int, approval_number: str, notes: str = "",
) -> LeaveApplication:
    """
    Final approval of a reviewed application.
    For annual leave the quota check-and-deduct runs in the same atomic block
    as the state write: QuotaExhausted rolls back both.
    """
    approval_number = (approval_number or "").strip()
    if not approval_number:
        raise ValidationError("approval_number is required")
    approver = _require_role(approver_id, directory.ROLE_APPROVER)

    with transaction.atomic():
        obj = _lock_application(application_id)
        target = next_state(obj.status, Action.APPROVE)
        if obj.leave_type == LeaveApplication.LeaveType.SICK and obj.supporting_document_id is None:
            raise ValidationError("Sick leave requires a physician letter")
        before = _snapshot(obj)

        remaining = None
        if obj.leave_type == QUOTA_BEARING_TYPE:
            remaining = quota.check_and_deduct(obj.employee_id, obj.day_length)

        repo.save_fields(obj, {
            "status": target,
            "approval_number": approval_number,
            "approved_by_id": approver_id,
            "approved_at": timezone.now(),
            "approval_notes": notes or "",
        })
        after = _snapshot(obj)
        if remaining is not None:
            after["remaining_allowance"] = remaining
        log_action(actor=approver_id, action=Action.APPROVE.value, object_type=OBJECT_TYPE,
                   object_id=obj.pk, before=before, after=after)
        _notify(obj, Audience.requester(obj.employee_id), "approved",
                f"Your leave application was approved by {approver.name}.",
                extra=f"Approval number: {approval_number}")

    logger.info("[leave] %s approved by emp#%s (remaining allowance: %s)",
                obj.document_number, approver_id, "-" if remaining is None else remaining)
    return obj


def decline(
    *, application_id: int, approver_id: int, reason: str = "",
) -> LeaveApplication:
    """Approver rejects a reviewed application; no quota interaction."""
    approver = _require_role(approver_id, directory.ROLE_APPROVER)

    with transaction.atomic():
        obj = _lock_application(application_id)
        target = next_state(obj.status, Action.DECLINE)
        before = _snapshot(obj)
        repo.save_fields(obj, {
            "status": target,
            "rejected_by_id": approver_id,
            "rejected_at": timezone.now(),
            "rejection_reason": reason or "",
        })
        log_action(actor=approver_id, action=Action.DECLINE.value, object_type=OBJECT_TYPE,
                   object_id=obj.pk, before=before, after=_snapshot(obj))
        _notify(obj, Audience.requester(obj.employee_id), "rejected",
                f"Your leave application was rejected by {approver.name}.",
                extra=f"Reason: {reason}" if reason else "")

    logger.info("[leave] %s declined by emp#%s", obj.document_number, approver_id)
    return obj


def get_application(application_id: int, actor: Optional[directory.Actor] = None) -> LeaveApplication:
    """
    Detail read. With an actor, applies listing scope: requesters see their own,
    reviewers their division, approvers everything. Out of scope reads as not found.
    """
    obj = repo.get_or_none(application_id)
    if obj is None:
        raise NotFoundError(f"Leave application {application_id} not found")
    if actor is None or actor.is_approver or obj.employee_id == actor.employee_id:
        return obj
    if actor.is_reviewer and obj.employee.division_id == actor.division_id:
        return obj
    raise NotFoundError(f"Leave application {application_id} not found")
