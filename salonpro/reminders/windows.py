"""Which customers have a birthday or anniversary coming up.

Matching is done on (month, day) pairs built from real calendar dates, so the
window wraps from December into January without any special casing.
"""
import calendar
import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salonpro.models import Customer
from .errors import InvalidArgument, LookupFailed
from .repository import find_customers_by_month_day

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7


class EventType(str, Enum):
    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"


def parse_event_type(value) -> EventType:
    if isinstance(value, EventType):
        return value
    try:
        return EventType(str(value).strip().lower())
    except ValueError:
        raise InvalidArgument(f"invalid event type: {value!r}") from None


def local_today(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def upcoming_month_days(today: date, days: int = DEFAULT_WINDOW_DAYS) -> List[Tuple[int, int]]:
    """(month, day) pairs for today through today+days inclusive."""
    pairs = []
    for offset in range(days + 1):
        d = today + timedelta(days=offset)
        pairs.append((d.month, d.day))
        # Feb 29 dates are celebrated on Feb 28 in common years
        if d.month == 2 and d.day == 28 and not calendar.isleap(d.year):
            pairs.append((2, 29))
    return pairs


def get_upcoming_customers(
    db: Session,
    salon_id,
    event_type,
    today: date,
    days: int = DEFAULT_WINDOW_DAYS,
) -> List[Customer]:
    event_type = parse_event_type(event_type)
    pairs = upcoming_month_days(today, days)
    try:
        return find_customers_by_month_day(db, salon_id, event_type.value, pairs)
    except SQLAlchemyError as e:
        raise LookupFailed(f"Failed to get {event_type.value} customers for salon {salon_id}: {e}") from e
