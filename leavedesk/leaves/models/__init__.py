# Load every model into the leaves.models namespace
from .mixins import TimeStampedModel

from .core import Division, Position
from .employee import Employee
from .document import SupportingDocument
from .sequence import DocumentSequence
from .leave import LeaveApplication
from .notification import Notification
from .audit import AuditLog

__all__ = [
    "TimeStampedModel",
    "Division", "Position",
    "Employee",
    "SupportingDocument",
    "DocumentSequence",
    "LeaveApplication",
    "Notification",
    "AuditLog",
]
