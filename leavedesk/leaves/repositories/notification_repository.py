from typing import Optional, Dict, Any, List
from django.db.models import QuerySet
from django.utils import timezone
from leaves.models import Notification

def create_notification(
    title: str,
    *,
    audience: str,
    audience_ref: str = "",
    to_emails: Optional[List[str]] = None,
    payload: Optional[Dict[str, Any]] = None,
    object_type: str = "",
    object_id: str = "",
    event: str = "",
    channel: int = Notification.Channel.EMAIL,
) -> Notification:
    return Notification.objects.create(
        title=title,
        audience=audience,
        audience_ref=str(audience_ref or ""),
        to_email=",".join(to_emails or []),
        payload=payload or {},
        object_type=object_type,
        object_id=str(object_id or ""),
        event=event,
        channel=channel,
        delivered=False,
        attempt_count=0,
    )

def mark_attempt(
    obj: Notification,
    *,
    delivered: bool,
    status_code: str = "",
    response: Optional[Dict[str, Any]] = None,
    error: str = "",
) -> Notification:
    obj.attempt_count += 1
    obj.delivered = delivered
    obj.delivered_at = timezone.now() if delivered else None
    obj.provider_status_code = status_code or ""
    obj.provider_response = response
    obj.last_error = "" if delivered else (error or "Unknown error")
    obj.save(update_fields=[
        "attempt_count", "delivered", "delivered_at", "provider_status_code",
        "provider_response", "last_error", "updated_at",
    ])
    return obj

def list_undelivered(channel: int, max_attempts: int) -> QuerySet:
    return (
        Notification.objects
        .filter(channel=channel, delivered=False, attempt_count__lt=max_attempts)
        .order_by("created_at")
    )
