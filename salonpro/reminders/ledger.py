"""Per-day markers so a restarted process does not resend the same batch."""
import logging
import threading
from datetime import date
from typing import Callable, Set, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .repository import create_run_marker, has_run_marker

logger = logging.getLogger(__name__)


class RunLedger:
    def already_ran(self, salon_id, event_type: str, run_date: date) -> bool:
        raise NotImplementedError

    def record(self, salon_id, event_type: str, run_date: date, sent_count: int = 0) -> None:
        raise NotImplementedError


class InMemoryRunLedger(RunLedger):
    """Process-local ledger; forgets everything on restart."""

    def __init__(self):
        self._seen: Set[Tuple[str, str, date]] = set()
        self._lock = threading.Lock()

    def already_ran(self, salon_id, event_type: str, run_date: date) -> bool:
        with self._lock:
            return (str(salon_id), event_type, run_date) in self._seen

    def record(self, salon_id, event_type: str, run_date: date, sent_count: int = 0) -> None:
        with self._lock:
            self._seen.add((str(salon_id), event_type, run_date))


class DatabaseRunLedger(RunLedger):
    """Ledger backed by the reminder_run_markers table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def already_ran(self, salon_id, event_type: str, run_date: date) -> bool:
        db = self._session_factory()
        try:
            return has_run_marker(db, salon_id, event_type, run_date)
        finally:
            db.close()

    def record(self, salon_id, event_type: str, run_date: date, sent_count: int = 0) -> None:
        db = self._session_factory()
        try:
            create_run_marker(db, salon_id, event_type, run_date, sent_count=sent_count)
        except IntegrityError:
            # Another worker recorded the same (salon, event, day) first
            db.rollback()
            logger.info(f"[Reminders] Run marker already present for salon {salon_id} {event_type} {run_date}")
        finally:
            db.close()
