"""SalonPro backend: birthday and anniversary reminders for salon customers."""

__version__ = "0.1.0"
