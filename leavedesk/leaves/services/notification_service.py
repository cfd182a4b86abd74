# -*- coding: utf-8 -*-
"""
Notification dispatcher.

- dispatch() resolves the audience to e-mail addresses, writes a Notification
  row (outbox/log) and sends it; Lark gets a copy when a webhook is configured.
- Best effort: DispatchFailure and transport errors are logged, never raised.
- dispatch_on_commit() is what the workflow uses: nothing is sent unless the
  transition's transaction commits.
"""
from __future__ import annotations
from dataclasses import dataclass
from functools import partial
from typing import Optional, Dict, Any, List, Tuple
import logging

from django.conf import settings
from django.db import transaction

from leaves.exceptions import DispatchFailure
from leaves.models import Notification
from leaves.repositories import notification_repository as repo
from leaves.selectors import directory_selector as directory
from leaves.utils.notify import send_email_notification, send_lark_notification, lark_enabled

log = logging.getLogger(__name__)

A = Notification.Audience


@dataclass(frozen=True)
class Audience:
    kind: str
    ref: Optional[int] = None

    @classmethod
    def requester(cls, employee_id: int) -> "Audience":
        return cls(A.REQUESTER, employee_id)

    @classmethod
    def division_reviewers(cls, division_id: int) -> "Audience":
        return cls(A.DIVISION_REVIEWERS, division_id)

    @classmethod
    def approvers(cls) -> "Audience":
        return cls(A.APPROVERS)


def resolve_emails(audience: Audience) -> List[str]:
    if audience.kind == A.REQUESTER:
        mail = directory.employee_email(audience.ref)
        return [mail] if mail else []
    if audience.kind == A.DIVISION_REVIEWERS:
        return directory.division_reviewer_emails(audience.ref)
    if audience.kind == A.APPROVERS:
        return directory.approver_emails()
    raise ValueError(f"Unknown audience: {audience.kind}")


def _deliver(
    *,
    audience: Audience,
    subject: str,
    text: str,
    html: Optional[str],
    object_type: str,
    object_id: str,
    event: str,
) -> Notification:
    payload: Dict[str, Any] = {"subject": subject, "text": text}
    if html:
        payload["html"] = html
    common = dict(
        audience=audience.kind,
        audience_ref=audience.ref or "",
        payload=payload,
        object_type=object_type,
        object_id=object_id,
        event=event,
    )

    noti = repo.create_notification(subject, to_emails=resolve_emails(audience), **common)
    email_ok = send_email_notification(noti)

    if lark_enabled():
        lark_noti = repo.create_notification(subject, channel=Notification.Channel.LARK, **common)
        send_lark_notification(lark_noti)

    if not email_ok:
        raise DispatchFailure(f"{event} -> {audience.kind}:{audience.ref or '-'}: {noti.last_error}")
    return noti


def dispatch(
    *,
    audience: Audience,
    subject: str,
    text: str,
    html: Optional[str] = None,
    object_type: str = "",
    object_id: str = "",
    event: str = "",
) -> Optional[Notification]:
    """Send one message to an audience. Returns the e-mail Notification, or None on failure."""
    try:
        return _deliver(
            audience=audience, subject=subject, text=text, html=html,
            object_type=object_type, object_id=str(object_id or ""), event=event,
        )
    except DispatchFailure as ex:
        log.warning("[notify] %s", ex.message)
    except Exception as ex:
        log.exception("[notify] dispatch of %s crashed: %s", event or subject, ex)
    return None


def dispatch_on_commit(**kwargs) -> None:
    transaction.on_commit(partial(dispatch, **kwargs))


def resend_undelivered(max_attempts: Optional[int] = None) -> Tuple[int, int]:
    """Retry failed e-mail notifications outside the request path. Returns (sent, failed)."""
    if max_attempts is None:
        max_attempts = int(settings.LEAVE_WORKFLOW.get("NOTIFICATION_MAX_ATTEMPTS", 5))
    sent = failed = 0
    for noti in repo.list_undelivered(Notification.Channel.EMAIL, max_attempts):
        if send_email_notification(noti):
            sent += 1
        else:
            failed += 1
    return sent, failed
