# -*- coding: utf-8 -*-
"""
Explicit transition table of LeaveApplication.status.

Only (source, action) pairs listed here are legal; approved/rejected have no
outgoing edges.
"""
from __future__ import annotations
from enum import Enum

from leaves.exceptions import ConflictError
from leaves.models import LeaveApplication

S = LeaveApplication.Status


class Action(str, Enum):
    REVIEW = "review"      # reviewer endorses
    REJECT = "reject"      # reviewer rejects
    APPROVE = "approve"    # approver grants
    DECLINE = "decline"    # approver rejects a reviewed application


TRANSITIONS = {
    (S.PENDING, Action.REVIEW): S.REVIEWED,
    (S.PENDING, Action.REJECT): S.REJECTED,
    (S.REVIEWED, Action.APPROVE): S.APPROVED,
    (S.REVIEWED, Action.DECLINE): S.REJECTED,
}


def next_state(current: str, action: Action) -> str:
    try:
        return TRANSITIONS[(S(current), action)]
    except (KeyError, ValueError):
        raise ConflictError(
            f"Cannot {action.value} an application in status '{current}'"
        ) from None


def allowed_actions(current: str) -> list:
    return [a for (src, a) in TRANSITIONS if src == current]
