# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
from typing import Optional, Tuple, Dict, Any

import requests
from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from leaves.models import Notification
from leaves.repositories import notification_repository as repo

logger = logging.getLogger(__name__)

# -----------------------------
# Helpers
# -----------------------------
def _mk_subject(subject: str) -> str:
    prefix = getattr(settings, "EMAIL_SUBJECT_PREFIX", "")
    return f"{prefix}{subject}" if prefix else subject

def _recipients(noti: Notification) -> list:
    return [e.strip() for e in (noti.to_email or "").split(",") if e.strip()]


# -----------------------------
# Email
# -----------------------------
def send_email_notification(noti: Notification) -> bool:
    """
    Send the e-mail described by a Notification row and record the attempt on it.
    Returns True/False; never raises for transport errors.
    """
    payload = noti.payload or {}
    tos = _recipients(noti)
    if not tos:
        logger.warning("[notify.email] No recipients for %s:%s; skip.", noti.audience, noti.audience_ref)
        repo.mark_attempt(noti, delivered=False, status_code="SKIP", error="No recipients")
        return False

    from_email = getattr(settings, "DEFAULT_FROM_EMAIL", None) or getattr(settings, "SERVER_EMAIL", None)
    if not from_email:
        logger.warning("[notify.email] DEFAULT_FROM_EMAIL / SERVER_EMAIL not set; skip.")
        repo.mark_attempt(noti, delivered=False, status_code="SKIP", error="From email not configured")
        return False

    try:
        msg = EmailMultiAlternatives(
            subject=_mk_subject(payload.get("subject") or noti.title),
            body=payload.get("text") or noti.title,
            from_email=from_email,
            to=tos,
        )
        if payload.get("html"):
            msg.attach_alternative(payload["html"], "text/html")
        msg.send(fail_silently=False)
    except Exception as ex:
        logger.warning("[notify.email] send failed: %s", ex)
        repo.mark_attempt(noti, delivered=False, status_code="ERROR", error=str(ex))
        return False

    repo.mark_attempt(noti, delivered=True, status_code="OK")
    return True


# -----------------------------
# Lark Webhook
# -----------------------------
def _post_lark(url: str, payload: Dict[str, Any], timeout: Optional[float] = None) -> Tuple[bool, str, str, Optional[Dict[str, Any]]]:
    """
    POST JSON to the Lark webhook.
    Returns (ok, status_code_str, resp_text, resp_json or None)
    """
    timeout = timeout or getattr(settings, "LARK_TIMEOUT", 8)
    try:
        r = requests.post(url, json=payload, timeout=timeout)
    except requests.RequestException as ex:
        return False, "EXC", str(ex), None
    text = r.text or ""
    try:
        rjson = r.json()
    except ValueError:
        rjson = None
    return r.status_code < 300, str(r.status_code), text[:2000], rjson


def lark_enabled() -> bool:
    return bool(getattr(settings, "LARK_LEAVE_WEBHOOK_URL", ""))


def send_lark_notification(noti: Notification, *, webhook_url: Optional[str] = None) -> bool:
    """Post the Notification's text to Lark/Feishu (webhook v2) and record the attempt."""
    url = webhook_url or getattr(settings, "LARK_LEAVE_WEBHOOK_URL", None)
    if not url:
        logger.warning("[notify.lark] LARK_LEAVE_WEBHOOK_URL not set; skip.")
        repo.mark_attempt(noti, delivered=False, status_code="SKIP", error="Webhook URL not configured")
        return False

    text = (noti.payload or {}).get("text") or noti.title
    ok, code, resp_text, resp_json = _post_lark(url, {"msg_type": "text", "content": {"text": text}})
    repo.mark_attempt(
        noti,
        delivered=ok,
        status_code=code,
        response=resp_json or {"text": resp_text[:500]},
        error="" if ok else (resp_text[:500] or "Unknown error"),
    )
    if not ok:
        logger.warning("[notify.lark] webhook responded %s", code)
    return ok
