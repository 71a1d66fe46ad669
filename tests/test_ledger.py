from datetime import date

from sqlalchemy import func, select

from salonpro.models import ReminderRunMarker
from salonpro.reminders.ledger import DatabaseRunLedger
from tests.factories import make_salon


def test_in_memory_ledger_is_keyed_by_salon_event_and_day(ledger):
    ledger.record("salon-1", "birthday", date(2025, 3, 10))

    assert ledger.already_ran("salon-1", "birthday", date(2025, 3, 10))
    assert not ledger.already_ran("salon-1", "anniversary", date(2025, 3, 10))
    assert not ledger.already_ran("salon-1", "birthday", date(2025, 3, 11))
    assert not ledger.already_ran("salon-2", "birthday", date(2025, 3, 10))


def test_database_ledger_persists_markers(db, session_factory):
    salon = make_salon(db)
    ledger = DatabaseRunLedger(session_factory)

    assert not ledger.already_ran(salon.id, "birthday", date(2025, 3, 10))
    ledger.record(salon.id, "birthday", date(2025, 3, 10), sent_count=4)

    assert ledger.already_ran(salon.id, "birthday", date(2025, 3, 10))
    assert DatabaseRunLedger(session_factory).already_ran(salon.id, "birthday", date(2025, 3, 10))
    marker = db.execute(select(ReminderRunMarker)).scalars().one()
    assert marker.sent_count == 4


def test_database_ledger_ignores_duplicate_record(db, session_factory):
    salon = make_salon(db)
    ledger = DatabaseRunLedger(session_factory)

    ledger.record(salon.id, "anniversary", date(2025, 3, 10))
    ledger.record(salon.id, "anniversary", date(2025, 3, 10))

    count = db.execute(select(func.count()).select_from(ReminderRunMarker)).scalar_one()
    assert count == 1
