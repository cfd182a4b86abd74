from django.db import models
from .mixins import TimeStampedModel

class Notification(TimeStampedModel):
    class Channel(models.IntegerChoices):
        EMAIL = 1, "Email"
        LARK  = 3, "Lark"

    class Audience(models.TextChoices):
        REQUESTER = "requester", "Requester"
        DIVISION_REVIEWERS = "division_reviewers", "Division reviewers"
        APPROVERS = "approvers", "Approvers"

    object_type = models.CharField(max_length=64, blank=True, default="", help_text="e.g. leave_application")
    object_id   = models.CharField(max_length=64, blank=True, default="")
    event       = models.CharField(max_length=64, blank=True, default="", help_text="submitted / reviewed / approved / rejected")

    audience     = models.CharField(max_length=32, choices=Audience.choices)
    audience_ref = models.CharField(max_length=64, blank=True, default="", help_text="employee id / division id")
    to_email     = models.TextField(blank=True, default="", help_text="comma separated")

    channel = models.IntegerField(choices=Channel.choices, default=Channel.EMAIL, db_index=True)
    title   = models.CharField(max_length=200)
    payload = models.JSONField(null=True, blank=True, help_text="Rendered message (subject/text/html)")

    delivered     = models.BooleanField(default=False, db_index=True)
    delivered_at  = models.DateTimeField(null=True, blank=True)
    attempt_count = models.IntegerField(default=0)
    last_error    = models.TextField(blank=True, default="")

    provider_status_code = models.CharField(max_length=32, blank=True, default="")
    provider_response    = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "Notification"
        ordering = ["-created_at"]

    def __str__(self):
        state = "sent" if self.delivered else "pending/failed"
        return f"NOTI[{self.get_channel_display()}] {self.audience}:{self.audience_ref or '-'} ({state})"
