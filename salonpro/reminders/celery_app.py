from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_ready

from .config import settings


celery_app = Celery(
    "reminders",
    broker=settings.CELERY_BROKER_URL or "memory://",
    backend=settings.CELERY_RESULT_BACKEND or None,
)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    timezone=settings.REMINDER_TIMEZONE,
    enable_utc=True,
    include=["salonpro.reminders.tasks"],
)

# Celery Beat schedule: one pass over all salons every day
celery_app.conf.beat_schedule = {
    "send-daily-reminders": {
        "task": "reminders.send_daily",
        "schedule": crontab(hour=settings.REMINDER_DAILY_HOUR, minute=settings.REMINDER_DAILY_MINUTE),
    },
}


@worker_ready.connect
def _run_on_startup(sender=None, **kwargs):
    # Mirror the in-process scheduler: one run as soon as the worker is up
    if settings.gateway_configured and settings.REMINDER_WORKER_STARTUP_RUN:
        celery_app.send_task("reminders.send_daily")
