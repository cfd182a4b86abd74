from django.db import models
from .mixins import TimeStampedModel


class SupportingDocument(TimeStampedModel):
    class Kind(models.TextChoices):
        PHYSICIAN_LETTER = "physician_letter", "Physician letter"
        OTHER = "other", "Other"

    file = models.FileField(upload_to="leave/documents/%Y/%m/")
    kind = models.CharField(max_length=32, choices=Kind.choices, default=Kind.PHYSICIAN_LETTER)
    original_name = models.CharField(max_length=255, blank=True, default="")
    uploaded_by = models.ForeignKey("leaves.Employee", on_delete=models.PROTECT, related_name="documents")

    class Meta:
        db_table = "SupportingDocument"

    def __str__(self):
        return f"DOC#{self.pk} {self.get_kind_display()} ({self.original_name or self.file.name})"
