from datetime import date
from typing import Optional
from uuid import UUID

from celery import shared_task

from .service import get_reminder_service


@shared_task(name="reminders.send_daily")
def send_daily_reminders_task(run_date: Optional[str] = None) -> dict:
    """Run one pass over all salons. ``run_date`` (YYYY-MM-DD) overrides today."""
    today = date.fromisoformat(run_date) if run_date else None
    summary = get_reminder_service().send_daily_reminders(today=today)
    return summary.as_dict()


@shared_task(name="reminders.send_test")
def send_test_message_task(phone: str, channel: str, body: Optional[str] = None, salon_id: Optional[str] = None) -> dict:
    service = get_reminder_service()
    body = service.resolve_test_body(UUID(salon_id) if salon_id else None, body)
    sid = service.send_test_message(phone, body, channel)
    return {"sid": sid, "channel": channel, "phone": phone, "body": body}
