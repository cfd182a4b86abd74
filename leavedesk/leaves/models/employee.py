from django.conf import settings
from django.db import models
from django.db.models import Q, CheckConstraint
from .mixins import TimeStampedModel


def default_annual_quota() -> int:
    return int(settings.LEAVE_WORKFLOW.get("DEFAULT_ANNUAL_QUOTA", 12))


class Employee(TimeStampedModel):
    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="employee",
    )
    name = models.CharField(max_length=200)
    email = models.EmailField(max_length=254, unique=True)
    division = models.ForeignKey("leaves.Division", on_delete=models.PROTECT, null=True, blank=True,
                                 related_name="employees")
    position = models.ForeignKey("leaves.Position", on_delete=models.PROTECT, null=True, blank=True,
                                 related_name="employees")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER)

    # Mutated only by the quota ledger (repositories.quota_repository).
    annual_leave_quota = models.PositiveIntegerField(default=default_annual_quota)

    class Meta:
        ordering = ["name"]
        db_table = "Employee"
        constraints = [
            CheckConstraint(name="employee_quota_non_negative", condition=Q(annual_leave_quota__gte=0)),
        ]

    def __str__(self):
        return f"{self.name} <#{self.pk}>"
