from django.db import models
from .mixins import TimeStampedModel


class DocumentSequence(TimeStampedModel):
    """One counter row per calendar year; `last_number` is the last committed number."""
    year = models.PositiveIntegerField(unique=True)
    last_number = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "DocumentSequence"
        ordering = ["-year"]

    def __str__(self):
        return f"SEQ {self.year}: {self.last_number}"
