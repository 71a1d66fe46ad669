from .salon import Salon
from .user import User
from .customer import Customer
from .reminder_template import ReminderTemplate, REMINDER_TYPES
from .reminder_run import ReminderRunMarker

__all__ = [
    "Salon",
    "User",
    "Customer",
    "ReminderTemplate",
    "REMINDER_TYPES",
    "ReminderRunMarker",
]
