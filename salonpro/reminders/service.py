"""Daily reminder run over every salon, plus the ad-hoc test send."""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import date
from functools import lru_cache
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .channels import CUSTOMER_NAME_PLACEHOLDER, Channel, fill_template, format_address, parse_channel
from .client import create_gateway
from .config import ReminderSettings, settings as default_settings
from .dispatcher import ReminderDispatcher
from .errors import ConfigurationMissing, LookupFailed, TemplateMissing
from .ledger import DatabaseRunLedger, RunLedger
from .metrics import (
    reminder_runs_total,
    reminder_salon_failures_total,
    reminder_salons_processed_total,
    reminder_salons_skipped_total,
)
from .repository import get_active_template, get_salon, list_active_user_salon_ids
from .windows import EventType, get_upcoming_customers, local_today

logger = logging.getLogger(__name__)

TEST_CUSTOMER_NAME = "Test Customer"
DEFAULT_TEST_BODY = f"Test reminder from SalonPro - {CUSTOMER_NAME_PLACEHOLDER}"


@dataclass
class SalonOutcome:
    salon_id: str
    processed: bool = False
    skipped_reason: Optional[str] = None
    failures: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass
class RunSummary:
    run_date: Optional[date] = None
    salons_seen: int = 0
    salons_processed: int = 0
    salons_skipped: int = 0
    unit_failures: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: bool = False
    already_running: bool = False

    def add(self, outcome: SalonOutcome) -> None:
        if outcome.processed:
            self.salons_processed += 1
        else:
            self.salons_skipped += 1
        self.unit_failures += outcome.failures
        self.sent += outcome.sent
        self.failed += outcome.failed
        self.skipped += outcome.skipped

    def as_dict(self) -> Dict:
        data = asdict(self)
        data["run_date"] = self.run_date.isoformat() if self.run_date else None
        return data


class ReminderService:
    """Process-scoped reminder component.

    Construct it once (``configure``), hand it to the scheduler (``arm``), and
    every trigger calls :meth:`send_daily_reminders` (``run``). Without Twilio
    credentials the service is unconfigured and runs are no-ops.
    """

    def __init__(
        self,
        settings: Optional[ReminderSettings] = None,
        gateway=None,
        session_factory: Optional[Callable[[], Session]] = None,
        ledger: Optional[RunLedger] = None,
        clock: Optional[Callable[[], date]] = None,
        max_workers: Optional[int] = None,
    ):
        self.settings = settings or default_settings
        if session_factory is None:
            from salonpro.db.session import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory

        self.gateway = gateway if gateway is not None else create_gateway(self.settings)
        if ledger is None and self.settings.REMINDER_DEDUP_ENABLED:
            ledger = DatabaseRunLedger(session_factory)
        self.ledger = ledger
        self.clock = clock or (lambda: local_today(self.settings.REMINDER_TIMEZONE))
        self.max_workers = max(1, max_workers or self.settings.REMINDER_MAX_WORKERS)
        self.cancel_event = threading.Event()
        self._run_lock = threading.Lock()
        self.dispatcher = ReminderDispatcher(
            self.gateway,
            sms_sender=self.settings.sms_sender,
            whatsapp_sender=self.settings.whatsapp_sender,
            cancel_event=self.cancel_event,
        )

    @property
    def configured(self) -> bool:
        return self.gateway is not None

    @property
    def running(self) -> bool:
        return self._run_lock.locked()

    def cancel(self) -> None:
        """Stop the in-flight run at the next salon or message boundary."""
        self.cancel_event.set()

    # Daily run
    def send_daily_reminders(self, today: Optional[date] = None) -> RunSummary:
        summary = RunSummary()
        if not self.configured:
            logger.info("[Reminders] Twilio not configured; daily run skipped")
            return summary

        # One run at a time per service, whatever triggered it
        if not self._run_lock.acquire(blocking=False):
            logger.warning("[Reminders] Daily run already in progress; this trigger is skipped")
            summary.already_running = True
            return summary
        try:
            return self._run_daily(summary, today)
        finally:
            self._run_lock.release()

    def _run_daily(self, summary: RunSummary, today: Optional[date]) -> RunSummary:
        self.cancel_event.clear()
        today = today or self.clock()
        summary.run_date = today
        reminder_runs_total.inc()
        logger.info(f"[Reminders] Starting daily reminder processing for {today.isoformat()}...")

        try:
            salon_ids = self._unique_salon_ids()
        except SQLAlchemyError as e:
            logger.error(f"[Reminders] Failed to fetch active users: {e}")
            return summary
        summary.salons_seen = len(salon_ids)

        if self.max_workers == 1:
            for salon_id in salon_ids:
                if self.cancel_event.is_set():
                    break
                summary.add(self.process_salon_reminders(salon_id, today))
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="reminders") as pool:
                for outcome in pool.map(lambda sid: self.process_salon_reminders(sid, today), salon_ids):
                    summary.add(outcome)

        summary.cancelled = self.cancel_event.is_set()
        logger.info(
            f"[Reminders] Daily reminder processing completed: salons={summary.salons_processed}/"
            f"{summary.salons_seen} sent={summary.sent} failed={summary.failed} skipped={summary.skipped}"
        )
        return summary

    def _unique_salon_ids(self) -> List:
        """Each salon once, in first-seen order, however many active users it has."""
        db = self.session_factory()
        try:
            salon_ids = list_active_user_salon_ids(db)
        finally:
            db.close()
        seen = set()
        unique = []
        for salon_id in salon_ids:
            if salon_id in seen:
                continue
            seen.add(salon_id)
            unique.append(salon_id)
        return unique

    def process_salon_reminders(self, salon_id, today: Optional[date] = None) -> SalonOutcome:
        outcome = SalonOutcome(salon_id=str(salon_id))
        if self.cancel_event.is_set():
            outcome.skipped_reason = "cancelled"
            return outcome
        today = today or self.clock()

        db = self.session_factory()
        try:
            try:
                salon = get_salon(db, salon_id)
            except SQLAlchemyError as e:
                logger.error(f"[Reminders] Salon {salon_id}: lookup failed: {e}")
                outcome.skipped_reason = "lookup_failed"
                reminder_salons_skipped_total.labels(reason="lookup_failed").inc()
                return outcome
            if salon is None:
                logger.warning(f"[Reminders] Salon {salon_id}: not found")
                outcome.skipped_reason = "not_found"
                reminder_salons_skipped_total.labels(reason="not_found").inc()
                return outcome
            # Only send if salon has at least one notification channel enabled
            if not salon.has_notification_channel:
                logger.info(
                    f"[Reminders] Salon {salon_id}: notifications skipped (enable WhatsApp or SMS in profile)"
                )
                outcome.skipped_reason = "no_channel"
                reminder_salons_skipped_total.labels(reason="no_channel").inc()
                return outcome

            outcome.processed = True
            reminder_salons_processed_total.inc()
            if salon.birthday_reminders:
                self._process_event(db, salon, EventType.BIRTHDAY, today, outcome)
            if salon.anniversary_reminders:
                self._process_event(db, salon, EventType.ANNIVERSARY, today, outcome)
        except Exception:
            # Unexpected errors stay with this salon; the run moves on
            logger.exception(f"[Reminders] Salon {salon_id}: unexpected error while processing reminders")
            outcome.failures += 1
            reminder_salon_failures_total.labels(reason="unexpected").inc()
        finally:
            db.close()
        return outcome

    def _process_event(self, db: Session, salon, event_type: EventType, today: date, outcome: SalonOutcome) -> None:
        if self.ledger is not None and self.ledger.already_ran(salon.id, event_type.value, today):
            logger.info(
                f"[Reminders] Salon {salon.id}: {event_type.value} reminders already sent for {today.isoformat()}"
            )
            return
        try:
            customers = get_upcoming_customers(
                db, salon.id, event_type, today, days=self.settings.REMINDER_WINDOW_DAYS
            )
            result = self.dispatcher.send_reminders(db, salon, event_type, customers)
        except TemplateMissing as e:
            logger.info(f"[Reminders] Salon {salon.id}: {e}")
            outcome.failures += 1
            reminder_salon_failures_total.labels(reason="template_missing").inc()
            return
        except LookupFailed as e:
            logger.error(f"[Reminders] Salon {salon.id}: {e}")
            outcome.failures += 1
            reminder_salon_failures_total.labels(reason="lookup_failed").inc()
            db.rollback()
            return

        outcome.sent += result.sent
        outcome.failed += result.failed
        outcome.skipped += result.skipped
        if self.ledger is not None and not self.cancel_event.is_set():
            self.ledger.record(salon.id, event_type.value, today, sent_count=result.sent)

    # Ad-hoc test send
    def send_test_message(self, phone: str, body: str, channel) -> str:
        """Send a single SMS or WhatsApp message and return its delivery id.

        ``phone`` should be E.164 (e.g. +919799570493).
        """
        channel = parse_channel(channel)
        if not self.configured:
            raise ConfigurationMissing("Twilio not configured; set TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN")
        sender = self.dispatcher.sender_for(channel)
        if not sender:
            env_name = "TWILIO_WHATSAPP_NUMBER" if channel == Channel.WHATSAPP else "TWILIO_PHONE_NUMBER"
            raise ConfigurationMissing(f"{env_name} not set")

        to = format_address(channel, phone)
        sid = self.gateway.send(to, format_address(channel, sender), body)
        logger.info(f"[Reminders] Test {channel.value} message sent to {phone}, SID: {sid}")
        return sid

    def resolve_test_body(self, salon_id=None, body: Optional[str] = None) -> str:
        """Body for a test send: the given text, else the salon's birthday then
        anniversary template, else a default, with a sample customer name."""
        body = (body or "").strip()
        if body:
            return body
        if salon_id is not None:
            db = self.session_factory()
            try:
                for event_type in (EventType.BIRTHDAY, EventType.ANNIVERSARY):
                    template = get_active_template(db, salon_id, event_type.value)
                    if template is not None and template.message:
                        return fill_template(template.message, TEST_CUSTOMER_NAME)
            except SQLAlchemyError as e:
                raise LookupFailed(f"Failed to fetch reminder templates: {e}") from e
            finally:
                db.close()
        return fill_template(DEFAULT_TEST_BODY, TEST_CUSTOMER_NAME)


@lru_cache()
def get_reminder_service() -> ReminderService:
    """Shared service for entry points that have no app state (Celery tasks, scripts)."""
    return ReminderService()


__all__ = [
    "ReminderService",
    "RunSummary",
    "SalonOutcome",
    "get_reminder_service",
]
