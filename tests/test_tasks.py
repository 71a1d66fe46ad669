from datetime import date
from unittest.mock import MagicMock, patch
from uuid import UUID

from salonpro.reminders.celery_app import celery_app
from salonpro.reminders.service import RunSummary
from salonpro.reminders.tasks import send_daily_reminders_task, send_test_message_task


def test_beat_schedule_runs_daily_task():
    entry = celery_app.conf.beat_schedule["send-daily-reminders"]

    assert entry["task"] == "reminders.send_daily"
    assert entry["schedule"].hour == {9}
    assert entry["schedule"].minute == {0}


def test_send_daily_task_returns_summary():
    service = MagicMock()
    service.send_daily_reminders.return_value = RunSummary(run_date=date(2025, 3, 10), salons_seen=2, sent=3)

    with patch("salonpro.reminders.tasks.get_reminder_service", return_value=service):
        result = send_daily_reminders_task("2025-03-10")

    service.send_daily_reminders.assert_called_once_with(today=date(2025, 3, 10))
    assert result["run_date"] == "2025-03-10"
    assert result["sent"] == 3


def test_send_test_task_resolves_body_and_sends():
    service = MagicMock()
    service.resolve_test_body.return_value = "Happy Birthday Test Customer"
    service.send_test_message.return_value = "SM123"
    salon_id = "3f0c5a0e-8d0f-4a55-9d6e-1b1f0b0a7c11"

    with patch("salonpro.reminders.tasks.get_reminder_service", return_value=service):
        result = send_test_message_task("+919799570493", "whatsapp", salon_id=salon_id)

    service.resolve_test_body.assert_called_once_with(UUID(salon_id), None)
    service.send_test_message.assert_called_once_with("+919799570493", "Happy Birthday Test Customer", "whatsapp")
    assert result["sid"] == "SM123"


def test_worker_startup_run_has_its_own_flag(reminder_settings):
    from salonpro.reminders import celery_app as celery_module

    settings = reminder_settings.model_copy(
        update={"REMINDER_SCHEDULER_ENABLED": False, "REMINDER_WORKER_STARTUP_RUN": True}
    )
    with patch.object(celery_module, "settings", settings), patch.object(celery_app, "send_task") as send_task:
        celery_module._run_on_startup()

    send_task.assert_called_once_with("reminders.send_daily")


def test_worker_startup_run_can_be_disabled(reminder_settings):
    from salonpro.reminders import celery_app as celery_module

    settings = reminder_settings.model_copy(update={"REMINDER_WORKER_STARTUP_RUN": False})
    with patch.object(celery_module, "settings", settings), patch.object(celery_app, "send_task") as send_task:
        celery_module._run_on_startup()

    send_task.assert_not_called()
