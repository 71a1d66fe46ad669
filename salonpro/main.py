import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from salonpro.core.config import settings
from salonpro.reminders.api import router as reminders_router
from salonpro.reminders.config import settings as reminder_settings
from salonpro.reminders.scheduler import ReminderScheduler
from salonpro.reminders.service import ReminderService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def create_app(reminder_service: Optional[ReminderService] = None, start_scheduler: Optional[bool] = None) -> FastAPI:
    if start_scheduler is None:
        start_scheduler = reminder_settings.REMINDER_SCHEDULER_ENABLED

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting up {settings.PROJECT_NAME}...")
        service = reminder_service or ReminderService()
        scheduler = ReminderScheduler(service)
        app.state.reminder_service = service
        app.state.reminder_scheduler = scheduler
        if start_scheduler:
            scheduler.arm()
        else:
            logger.info("[Scheduler] Disabled via REMINDER_SCHEDULER_ENABLED")
        yield
        logger.info(f"Shutting down {settings.PROJECT_NAME}...")
        scheduler.shutdown()

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)
    app.include_router(reminders_router, prefix=f"{settings.API_V1_STR}/reminders", tags=["reminders"])
    if reminder_settings.REMINDER_METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("salonpro.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT)
