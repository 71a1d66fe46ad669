from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from salonpro.reminders.api import router
from salonpro.reminders.config import ReminderSettings
from salonpro.reminders.scheduler import SchedulerState
from salonpro.reminders.service import ReminderService
from tests.factories import FakeGateway, make_salon, make_template


def build_client(service, scheduler=None) -> TestClient:
    app = FastAPI()
    app.include_router(router, prefix="/api/v1/reminders")
    app.state.reminder_service = service
    app.state.reminder_scheduler = scheduler
    return TestClient(app)


@pytest.fixture
def client(service):
    return build_client(service)


def test_send_test_whatsapp(client, gateway):
    response = client.post(
        "/api/v1/reminders/test",
        json={"phone": "+919799570493", "channel": "whatsapp", "message": "Hello"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Test whatsapp sent successfully"
    assert data["body"] == "Hello"
    assert data["sid"].startswith("SM")
    assert gateway.sent == [("whatsapp:+919799570493", "whatsapp:+15559999999", "Hello")]


def test_send_test_uses_salon_template(client, db, gateway):
    salon = make_salon(db)
    make_template(db, salon, message="Happy Birthday [CustomerName]")

    response = client.post(
        "/api/v1/reminders/test",
        json={"phone": "+919799570493", "channel": "sms", "salon_id": str(salon.id)},
    )

    assert response.status_code == 200
    assert response.json()["body"] == "Happy Birthday Test Customer"
    assert gateway.sent[0][:2] == ("+919799570493", "+15550000000")


def test_send_test_rejects_bad_channel(client, gateway):
    response = client.post("/api/v1/reminders/test", json={"phone": "+919799570493", "channel": "email"})

    assert response.status_code == 400
    assert gateway.sent == []


def test_send_test_rejects_blank_phone(client):
    response = client.post("/api/v1/reminders/test", json={"phone": "   ", "channel": "sms"})
    assert response.status_code == 400


def test_send_test_when_unconfigured(session_factory):
    settings = ReminderSettings(_env_file=None, TWILIO_ACCOUNT_SID=None, TWILIO_AUTH_TOKEN=None)
    client = build_client(ReminderService(settings=settings, session_factory=session_factory))

    response = client.post("/api/v1/reminders/test", json={"phone": "+919799570493", "channel": "sms"})

    assert response.status_code == 503


def test_send_test_gateway_failure(reminder_settings, session_factory):
    service = ReminderService(
        settings=reminder_settings,
        gateway=FakeGateway(fail_for={"+919799570493"}),
        session_factory=session_factory,
    )
    client = build_client(service)

    response = client.post("/api/v1/reminders/test", json={"phone": "+919799570493", "channel": "sms"})

    assert response.status_code == 502
    assert "Failed to send test notification" in response.json()["detail"]


def test_trigger_run_is_queued(client):
    response = client.post("/api/v1/reminders/run")

    assert response.status_code == 202
    assert response.json()["status"] == "queued"


def test_health_reports_scheduler_state(service):
    client = build_client(service, scheduler=SimpleNamespace(state=SchedulerState.ACTIVE))

    response = client.get("/api/v1/reminders/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "reminders", "scheduler": "active"}


def test_trigger_run_conflicts_with_run_in_progress(client, service, gateway):
    service._run_lock.acquire()
    try:
        response = client.post("/api/v1/reminders/run")
    finally:
        service._run_lock.release()

    assert response.status_code == 409
    assert gateway.sent == []
