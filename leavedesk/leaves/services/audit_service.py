from leaves.models import AuditLog

def log_action(*, actor: int, action: str, object_type: str, object_id, before=None, after=None) -> AuditLog:
    """`actor` is the acting employee id."""
    return AuditLog.objects.create(
        actor_employee_id=actor, action=action, object_type=object_type, object_id=str(object_id),
        before=before, after=after,
    )
