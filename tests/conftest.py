from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salonpro.db.base import Base
from salonpro.reminders.config import ReminderSettings
from salonpro.reminders.ledger import InMemoryRunLedger
from salonpro.reminders.service import ReminderService
from tests.factories import FakeGateway


@pytest.fixture
def today():
    return date(2025, 3, 10)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def reminder_settings():
    return ReminderSettings(
        _env_file=None,
        TWILIO_ACCOUNT_SID="ACtest",
        TWILIO_AUTH_TOKEN="secret",
        TWILIO_PHONE_NUMBER="+15550000000",
        TWILIO_WHATSAPP_NUMBER="whatsapp:+15559999999",
        REMINDER_TIMEZONE="UTC",
        REMINDER_WINDOW_DAYS=7,
        REMINDER_MAX_WORKERS=1,
        REMINDER_DEDUP_ENABLED=False,
    )


@pytest.fixture
def service(reminder_settings, gateway, session_factory, today):
    return ReminderService(
        settings=reminder_settings,
        gateway=gateway,
        session_factory=session_factory,
        clock=lambda: today,
    )


@pytest.fixture
def ledger():
    return InMemoryRunLedger()
