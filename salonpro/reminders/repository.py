from datetime import date
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import and_, extract, or_, select
from sqlalchemy.orm import Session

from salonpro.models import Customer, ReminderRunMarker, ReminderTemplate, Salon, User


def _event_column(event_type: str):
    if event_type == "birthday":
        return Customer.birthday
    if event_type == "anniversary":
        return Customer.anniversary
    raise ValueError(f"invalid event type: {event_type}")


def list_active_user_salon_ids(db: Session) -> List:
    """Salon id of every active operator account, one entry per user."""
    stmt = (
        select(User.salon_id)
        .where(User.is_active == True)  # noqa: E712
        .order_by(User.created_at.asc())
    )
    return list(db.execute(stmt).scalars())


def get_salon(db: Session, salon_id) -> Optional[Salon]:
    return db.get(Salon, salon_id)


def get_active_template(db: Session, salon_id, event_type: str) -> Optional[ReminderTemplate]:
    stmt = (
        select(ReminderTemplate)
        .where(ReminderTemplate.salon_id == salon_id)
        .where(ReminderTemplate.type == event_type)
        .where(ReminderTemplate.is_active == True)  # noqa: E712
        .order_by(ReminderTemplate.created_at.asc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def find_customers_by_month_day(
    db: Session,
    salon_id,
    event_type: str,
    pairs: Sequence[Tuple[int, int]],
) -> List[Customer]:
    """Active customers of a salon whose event date falls on any (month, day) pair."""
    if not pairs:
        return []
    column = _event_column(event_type)
    matches = [
        and_(extract("month", column) == month, extract("day", column) == day)
        for month, day in pairs
    ]
    stmt = (
        select(Customer)
        .where(Customer.salon_id == salon_id)
        .where(Customer.is_active == True)  # noqa: E712
        .where(column.isnot(None))
        .where(or_(*matches))
        .order_by(Customer.name.asc())
    )
    return list(db.execute(stmt).scalars())


def has_run_marker(db: Session, salon_id, event_type: str, run_date: date) -> bool:
    stmt = (
        select(ReminderRunMarker.id)
        .where(ReminderRunMarker.salon_id == salon_id)
        .where(ReminderRunMarker.event_type == event_type)
        .where(ReminderRunMarker.run_date == run_date)
        .limit(1)
    )
    return db.execute(stmt).first() is not None


def create_run_marker(db: Session, salon_id, event_type: str, run_date: date, sent_count: int = 0) -> ReminderRunMarker:
    marker = ReminderRunMarker(
        salon_id=salon_id,
        event_type=event_type,
        run_date=run_date,
        sent_count=sent_count,
    )
    db.add(marker)
    db.commit()
    db.refresh(marker)
    return marker
