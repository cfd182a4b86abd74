from django.db import models
from .mixins import TimeStampedModel

# Position name that marks an admin employee as a division reviewer.
MANAGER_POSITION_NAME = "Manager"


class Division(TimeStampedModel):
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["name"]
        db_table = "Division"

    def __str__(self):
        return self.name


class Position(TimeStampedModel):
    name = models.CharField(max_length=120, unique=True)

    class Meta:
        ordering = ["name"]
        db_table = "Position"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        # stored trimmed: role checks and the reviewer/approver queries compare it with iexact
        self.name = (self.name or "").strip()
        super().save(*args, **kwargs)

    @property
    def is_manager(self) -> bool:
        return self.name.lower() == MANAGER_POSITION_NAME.lower()
