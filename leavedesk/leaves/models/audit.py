from django.db import models
from .mixins import TimeStampedModel


class AuditLog(TimeStampedModel):
    """Append-only trail of workflow transitions; written in the transition's own transaction."""
    class Action(models.TextChoices):
        SUBMIT = "submit", "Submitted"
        REVIEW = "review", "Reviewed"
        REJECT = "reject", "Rejected by reviewer"
        APPROVE = "approve", "Approved"
        DECLINE = "decline", "Rejected by approver"

    actor_employee_id = models.IntegerField(null=True, blank=True, db_index=True)
    action = models.CharField(max_length=16, choices=Action.choices)
    object_type = models.CharField(max_length=64, default="leave_application")
    object_id = models.CharField(max_length=64)
    # {"status", "document_number", "day_length"[, "remaining_allowance"]}
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "LeaveAuditLog"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["object_type", "object_id"]),
        ]

    def __str__(self):
        return f"{self.get_action_display()} {self.object_type}#{self.object_id} by emp#{self.actor_employee_id}"
