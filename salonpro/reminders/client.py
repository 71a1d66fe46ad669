"""Twilio gateway adapter used for both SMS and WhatsApp reminders."""
import logging
from typing import Optional

import requests
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from .config import ReminderSettings
from .errors import SendFailed

logger = logging.getLogger(__name__)


class TwilioGateway:
    """Sends one message per call and returns the Twilio message SID.

    Addresses are passed through as given, so WhatsApp callers must already
    use the "whatsapp:+E164" form for both ``to`` and ``from_``.
    """

    def __init__(self, account_sid: str, auth_token: str, timeout: float = 5.0, client: Optional[Client] = None):
        if client is None:
            # Bound every REST call
            http_client = TwilioHttpClient(timeout=timeout)
            client = Client(account_sid, auth_token, http_client=http_client)
        self._client = client

    def send(self, to: str, from_: str, body: str) -> str:
        try:
            message = self._client.messages.create(to=to, from_=from_, body=body)
        except TwilioRestException as e:
            raise SendFailed(f"Twilio rejected message to {to}: {e.msg}", to=to, code=e.code) from e
        except (TwilioException, requests.RequestException) as e:
            raise SendFailed(f"Twilio request for {to} failed: {e}", to=to) from e
        return message.sid


def create_gateway(settings: ReminderSettings) -> Optional[TwilioGateway]:
    """Build the gateway from settings, or return None when credentials are missing."""
    if not settings.gateway_configured:
        logger.warning(
            "[Twilio] Not configured (TWILIO_ACCOUNT_SID or TWILIO_AUTH_TOKEN missing). "
            "Reminder notifications disabled."
        )
        return None
    gateway = TwilioGateway(
        settings.TWILIO_ACCOUNT_SID,
        settings.TWILIO_AUTH_TOKEN,
        timeout=settings.REMINDER_SEND_TIMEOUT_SECONDS,
    )
    logger.info("[Twilio] Client initialized; notifications will be sent when the scheduler runs.")
    return gateway
