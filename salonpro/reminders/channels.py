from enum import Enum
from typing import Optional

from .config import WHATSAPP_PREFIX
from .errors import InvalidArgument


CUSTOMER_NAME_PLACEHOLDER = "[CustomerName]"


class Channel(str, Enum):
    SMS = "sms"
    WHATSAPP = "whatsapp"


def parse_channel(value) -> Channel:
    if isinstance(value, Channel):
        return value
    normalized = str(value or "").strip().lower()
    try:
        return Channel(normalized)
    except ValueError:
        raise InvalidArgument(f"channel must be 'sms' or 'whatsapp', got {value!r}") from None


def select_channel(
    phone: Optional[str],
    whatsapp_enabled: bool,
    sms_enabled: bool,
    whatsapp_sender: Optional[str],
    sms_sender: Optional[str],
) -> Optional[Channel]:
    """Pick the outbound channel for one customer, or None to skip them.

    WhatsApp wins whenever it is eligible; it needs an international
    ("+"-prefixed) number. SMS is the fallback.
    """
    phone = (phone or "").strip()
    if not phone:
        return None
    if whatsapp_enabled and phone.startswith("+") and whatsapp_sender:
        return Channel.WHATSAPP
    if sms_enabled and sms_sender:
        return Channel.SMS
    return None


def format_address(channel: Channel, number: str) -> str:
    number = number.strip()
    if channel == Channel.WHATSAPP:
        return f"{WHATSAPP_PREFIX}{number}"
    return number


def fill_template(message: str, customer_name: Optional[str]) -> str:
    return message.replace(CUSTOMER_NAME_PLACEHOLDER, customer_name or "")
