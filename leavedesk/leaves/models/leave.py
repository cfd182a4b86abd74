from typing import Optional, Dict, Any

from django.db import models
from django.db.models import Q, F, CheckConstraint, UniqueConstraint
from .mixins import TimeStampedModel


class LeaveApplication(TimeStampedModel):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        REVIEWED = "reviewed", "Reviewed"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    class LeaveType(models.TextChoices):
        SICK = "sick", "Sick leave"
        ANNUAL = "annual", "Annual leave"
        MATERNITY = "maternity", "Maternity leave"
        MAJOR = "major", "Major leave"

    employee = models.ForeignKey("leaves.Employee", on_delete=models.PROTECT, related_name="leave_applications")

    # "NNN/YYYY"; year + seq are the raw allocator output
    document_number = models.CharField(max_length=32, unique=True, editable=False)
    document_year = models.PositiveIntegerField(editable=False)
    document_seq = models.PositiveIntegerField(editable=False)
    issued_at = models.DateTimeField(editable=False)

    start_date = models.DateField()
    end_date = models.DateField()
    day_length = models.PositiveIntegerField()

    leave_type = models.CharField(max_length=16, choices=LeaveType.choices)
    reason = models.TextField()
    description = models.TextField()
    supporting_document = models.ForeignKey(
        "leaves.SupportingDocument", on_delete=models.PROTECT, null=True, blank=True,
        related_name="leave_applications",
    )

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)

    reviewed_by = models.ForeignKey("leaves.Employee", on_delete=models.PROTECT, null=True, blank=True,
                                    related_name="+")
    reviewed_at = models.DateTimeField(null=True, blank=True)
    review_notes = models.TextField(blank=True, default="")

    rejected_by = models.ForeignKey("leaves.Employee", on_delete=models.PROTECT, null=True, blank=True,
                                    related_name="+")
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default="")

    approval_number = models.CharField(max_length=64, blank=True, default="")
    approved_by = models.ForeignKey("leaves.Employee", on_delete=models.PROTECT, null=True, blank=True,
                                    related_name="+")
    approved_at = models.DateTimeField(null=True, blank=True)
    approval_notes = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["issued_at"]
        db_table = "LeaveApplication"
        constraints = [
            CheckConstraint(name="leave_application_dates_valid", condition=Q(end_date__gte=F("start_date"))),
            UniqueConstraint(fields=["document_year", "document_seq"], name="uniq_leave_document_year_seq"),
            CheckConstraint(
                name="leave_application_approval_iff_approved",
                condition=(
                    Q(status="approved", approved_at__isnull=False, approved_by__isnull=False)
                    | (~Q(status="approved") & Q(approved_at__isnull=True, approved_by__isnull=True))
                ),
            ),
        ]
        indexes = [
            models.Index(fields=["employee", "status"]),
            models.Index(fields=["start_date"]),
        ]

    def __str__(self):
        return f"LV {self.document_number} emp#{self.employee_id} {self.leave_type} {self.start_date}→{self.end_date} [{self.status}]"

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.Status.APPROVED, self.Status.REJECTED)

    @property
    def review_record(self) -> Optional[Dict[str, Any]]:
        if self.reviewed_at is None:
            return None
        return {"reviewer_id": self.reviewed_by_id, "reviewed_at": self.reviewed_at, "notes": self.review_notes}

    @property
    def rejection_record(self) -> Optional[Dict[str, Any]]:
        if self.rejected_at is None:
            return None
        return {"rejected_by": self.rejected_by_id, "rejected_at": self.rejected_at, "reason": self.rejection_reason}

    @property
    def approval_record(self) -> Optional[Dict[str, Any]]:
        if self.status != self.Status.APPROVED:
            return None
        return {
            "approval_number": self.approval_number,
            "approved_by": self.approved_by_id,
            "approved_at": self.approved_at,
            "notes": self.approval_notes,
        }


# ====== Policy: fixed day ceilings per leave type (annual is bounded by the quota instead) ======
LEAVE_DAY_CEILINGS = {
    LeaveApplication.LeaveType.SICK: 14,
    LeaveApplication.LeaveType.MATERNITY: 45,
    LeaveApplication.LeaveType.MAJOR: 90,
}

# Leave type whose approval consumes Employee.annual_leave_quota
QUOTA_BEARING_TYPE = LeaveApplication.LeaveType.ANNUAL
