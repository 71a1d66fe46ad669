import logging
from datetime import datetime
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .service import ReminderService, RunSummary

logger = logging.getLogger(__name__)

DAILY_JOB_ID = "send_daily_reminders"


class SchedulerState(str, Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    ACTIVE = "active"
    STOPPED = "stopped"


class ReminderScheduler:
    """Daily trigger for the reminder run.

    Arming schedules the run every day at the configured wall-clock time and
    fires it once straight away. There is no catch-up for runs missed while
    the process was down. Without Twilio credentials ``arm`` does nothing.
    """

    def __init__(self, service: ReminderService, scheduler: Optional[BackgroundScheduler] = None):
        self.service = service
        self.settings = service.settings
        self.timezone = ZoneInfo(self.settings.REMINDER_TIMEZONE)
        self._scheduler = scheduler
        self.state = SchedulerState.UNCONFIGURED
        self.configure()

    def configure(self) -> SchedulerState:
        if self.state in (SchedulerState.ACTIVE, SchedulerState.STOPPED):
            return self.state
        self.state = SchedulerState.CONFIGURED if self.service.configured else SchedulerState.UNCONFIGURED
        return self.state

    def arm(self, run_immediately: bool = True) -> bool:
        if self.state == SchedulerState.UNCONFIGURED:
            logger.info("[Scheduler] Reminder scheduler not started: Twilio client is not configured.")
            return False
        if self.state == SchedulerState.ACTIVE:
            logger.info("[Scheduler] Reminder scheduler already running, skipping")
            return True

        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(timezone=self.timezone)

        hour = self.settings.REMINDER_DAILY_HOUR
        minute = self.settings.REMINDER_DAILY_MINUTE
        job_kwargs = {}
        if run_immediately:
            # Same job as the daily trigger so the startup run never overlaps it
            job_kwargs["next_run_time"] = datetime.now(self.timezone)
        self._scheduler.add_job(
            self.run,
            trigger=CronTrigger(hour=hour, minute=minute, timezone=self.timezone),
            id=DAILY_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            **job_kwargs,
        )
        self._scheduler.start()
        self.state = SchedulerState.ACTIVE
        logger.info(
            f"[Scheduler] Reminder scheduler started (runs daily at {hour:02d}:{minute:02d} "
            f"{self.settings.REMINDER_TIMEZONE}{' and once on startup' if run_immediately else ''})"
        )
        return True

    def run(self) -> Optional[RunSummary]:
        try:
            return self.service.send_daily_reminders()
        except Exception:
            logger.exception("[Scheduler] Daily reminder run failed")
            return None

    def shutdown(self, wait: bool = False) -> None:
        if self.state != SchedulerState.ACTIVE:
            return
        self.service.cancel()
        self._scheduler.shutdown(wait=wait)
        self.state = SchedulerState.STOPPED
        logger.info("[Scheduler] Reminder scheduler stopped")

    @property
    def next_run_time(self) -> Optional[datetime]:
        if self.state != SchedulerState.ACTIVE:
            return None
        job = self._scheduler.get_job(DAILY_JOB_ID)
        return job.next_run_time if job else None
