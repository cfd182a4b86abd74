# -*- coding: utf-8 -*-
"""
Error taxonomy of the leave workflow.

Every mutation-class error (validation, conflict, allocation, quota) is raised
before or inside the transition's atomic block, so the data is left exactly as
it was before the call.
"""
from __future__ import annotations


class LeaveWorkflowError(Exception):
    status_code = 400
    default_message = "Leave workflow error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LeaveWorkflowError):
    """Malformed or policy-violating input (dates, leave type, day ceilings, filters)."""
    status_code = 400
    default_message = "Invalid input"


class NotFoundError(LeaveWorkflowError):
    status_code = 404
    default_message = "Not found"


class ConflictError(LeaveWorkflowError):
    """Transition attempted from a state that does not allow it."""
    status_code = 409
    default_message = "Transition not allowed from the current state"


class QuotaExhausted(ConflictError):
    default_message = "Insufficient annual leave quota"


class AllocationFailure(LeaveWorkflowError):
    status_code = 503
    default_message = "Failed to allocate a document number"


class DispatchFailure(LeaveWorkflowError):
    """Raised inside the notification dispatcher only; never reaches a caller of the workflow."""
    status_code = 502
    default_message = "Notification could not be delivered"
