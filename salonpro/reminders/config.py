from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


WHATSAPP_PREFIX = "whatsapp:"


class ReminderSettings(BaseSettings):
    # Twilio gateway
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_PHONE_NUMBER: Optional[str] = None  # SMS sender
    TWILIO_WHATSAPP_NUMBER: Optional[str] = None  # may be given as "whatsapp:+1..."

    # Scheduling (daily at 09:00 local by default)
    REMINDER_SCHEDULER_ENABLED: bool = True
    REMINDER_DAILY_HOUR: int = 9
    REMINDER_DAILY_MINUTE: int = 0
    REMINDER_TIMEZONE: str = "Asia/Kolkata"
    REMINDER_WINDOW_DAYS: int = 7

    # Dispatch
    REMINDER_SEND_TIMEOUT_SECONDS: float = 5.0
    REMINDER_MAX_WORKERS: int = 1
    REMINDER_DEDUP_ENABLED: bool = False

    # Celery configuration (worker + beat deployments)
    CELERY_BROKER_URL: Optional[str] = None
    CELERY_RESULT_BACKEND: Optional[str] = None
    REMINDER_WORKER_STARTUP_RUN: bool = True  # worker fires one run when it comes up

    # Metrics
    REMINDER_METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    @field_validator(
        "TWILIO_ACCOUNT_SID",
        "TWILIO_AUTH_TOKEN",
        "TWILIO_PHONE_NUMBER",
        "TWILIO_WHATSAPP_NUMBER",
        mode="before",
    )
    @classmethod
    def _strip_blank(cls, v: Optional[str]) -> Optional[str]:
        # Treat blank values the same as unset
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("REMINDER_DAILY_HOUR")
    @classmethod
    def _valid_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("REMINDER_DAILY_HOUR must be between 0 and 23")
        return v

    @field_validator("REMINDER_DAILY_MINUTE")
    @classmethod
    def _valid_minute(cls, v: int) -> int:
        if not 0 <= v <= 59:
            raise ValueError("REMINDER_DAILY_MINUTE must be between 0 and 59")
        return v

    @property
    def gateway_configured(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN)

    @property
    def sms_sender(self) -> Optional[str]:
        return self.TWILIO_PHONE_NUMBER

    @property
    def whatsapp_sender(self) -> Optional[str]:
        """WhatsApp sender as a bare number, without the "whatsapp:" address prefix."""
        if not self.TWILIO_WHATSAPP_NUMBER:
            return None
        number = self.TWILIO_WHATSAPP_NUMBER
        if number.startswith(WHATSAPP_PREFIX):
            number = number[len(WHATSAPP_PREFIX):].strip()
        return number or None


settings = ReminderSettings()
