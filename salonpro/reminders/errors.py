class ReminderError(Exception):
    """Base class for reminder pipeline failures."""


class ConfigurationMissing(ReminderError):
    """Gateway credentials or a channel sender are not configured."""


class InvalidArgument(ReminderError, ValueError):
    """Unknown event type or channel."""


class LookupFailed(ReminderError):
    """The data store could not answer a reminder query."""


class TemplateMissing(ReminderError):
    """No active template exists for a salon and event type."""

    def __init__(self, salon_id, event_type):
        super().__init__(f"No active {event_type} template for salon {salon_id}")
        self.salon_id = salon_id
        self.event_type = event_type


class SendFailed(ReminderError):
    """The gateway rejected a message or could not be reached."""

    def __init__(self, message: str, to: str = "", code=None):
        super().__init__(message)
        self.to = to
        self.code = code
