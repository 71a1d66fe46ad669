from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from salonpro.reminders.errors import InvalidArgument, LookupFailed
from salonpro.reminders.windows import (
    EventType,
    get_upcoming_customers,
    parse_event_type,
    upcoming_month_days,
)
from tests.factories import birthday_in, make_customer, make_salon


def test_upcoming_month_days_covers_eight_days():
    pairs = upcoming_month_days(date(2025, 3, 10), days=7)
    assert pairs == [(3, 10), (3, 11), (3, 12), (3, 13), (3, 14), (3, 15), (3, 16), (3, 17)]


def test_upcoming_month_days_wraps_into_january():
    pairs = upcoming_month_days(date(2025, 12, 28), days=7)
    assert pairs[:4] == [(12, 28), (12, 29), (12, 30), (12, 31)]
    assert pairs[4:] == [(1, 1), (1, 2), (1, 3), (1, 4)]


def test_upcoming_month_days_adds_feb_29_in_common_years():
    assert (2, 29) in upcoming_month_days(date(2027, 2, 25))
    assert (2, 29) not in upcoming_month_days(date(2027, 2, 10))
    # Leap year: Feb 29 is a real calendar day, listed once
    assert upcoming_month_days(date(2028, 2, 25)).count((2, 29)) == 1


def test_parse_event_type():
    assert parse_event_type(" Birthday ") == EventType.BIRTHDAY
    assert parse_event_type(EventType.ANNIVERSARY) == EventType.ANNIVERSARY
    with pytest.raises(InvalidArgument):
        parse_event_type("wedding")


@pytest.mark.parametrize("offset", range(0, 8))
def test_customers_within_window_are_included(db, today, offset):
    salon = make_salon(db)
    customer = make_customer(db, salon, birthday=birthday_in(offset, today))

    found = get_upcoming_customers(db, salon.id, "birthday", today)

    assert [c.id for c in found] == [customer.id]


@pytest.mark.parametrize("offset", [-1, 8, 30])
def test_customers_outside_window_are_excluded(db, today, offset):
    salon = make_salon(db)
    make_customer(db, salon, birthday=birthday_in(offset, today))

    assert get_upcoming_customers(db, salon.id, "birthday", today) == []


def test_window_crosses_year_boundary(db):
    salon = make_salon(db)
    dec_30 = make_customer(db, salon, name="Dec", birthday=date(1985, 12, 30))
    jan_1 = make_customer(db, salon, name="Jan", birthday=date(1985, 1, 1))
    make_customer(db, salon, name="Late", birthday=date(1985, 1, 2))

    found = get_upcoming_customers(db, salon.id, "birthday", date(2025, 12, 25))

    assert {c.id for c in found} == {dec_30.id, jan_1.id}


def test_only_active_customers_of_the_salon_with_a_date(db, today):
    salon = make_salon(db)
    other = make_salon(db)
    wanted = make_customer(db, salon, birthday=birthday_in(2, today))
    make_customer(db, salon, birthday=birthday_in(2, today), is_active=False)
    make_customer(db, salon, birthday=None)
    make_customer(db, other, birthday=birthday_in(2, today))

    found = get_upcoming_customers(db, salon.id, EventType.BIRTHDAY, today)

    assert [c.id for c in found] == [wanted.id]


def test_anniversary_uses_anniversary_date(db, today):
    salon = make_salon(db)
    make_customer(db, salon, birthday=birthday_in(1, today), anniversary=None)
    married = make_customer(db, salon, birthday=None, anniversary=birthday_in(3, today, year=2010))

    found = get_upcoming_customers(db, salon.id, "anniversary", today)

    assert [c.id for c in found] == [married.id]


def test_resolver_is_idempotent(db, today):
    salon = make_salon(db)
    for offset in (0, 3, 7):
        make_customer(db, salon, birthday=birthday_in(offset, today))

    first = get_upcoming_customers(db, salon.id, "birthday", today)
    second = get_upcoming_customers(db, salon.id, "birthday", today)

    assert [c.id for c in first] == [c.id for c in second]
    assert len(first) == 3


def test_unknown_event_type_is_rejected(db, today):
    with pytest.raises(InvalidArgument):
        get_upcoming_customers(db, "salon", "wedding", today)


def test_store_errors_become_lookup_failed(db, today):
    error = OperationalError("SELECT", {}, Exception("connection lost"))
    with patch("salonpro.reminders.windows.find_customers_by_month_day", side_effect=error):
        with pytest.raises(LookupFailed):
            get_upcoming_customers(db, "salon", "birthday", today)
