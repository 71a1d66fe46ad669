import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salonpro.models import Customer, Salon
from .channels import Channel, fill_template, format_address, select_channel
from .errors import LookupFailed, SendFailed, TemplateMissing
from .metrics import reminders_failed_total, reminders_sent_total, reminders_skipped_total
from .repository import get_active_template
from .windows import parse_event_type

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    delivery_ids: List[str] = field(default_factory=list)


class ReminderDispatcher:
    """Sends one salon's template to a set of customers, one message each.

    A failed send is logged and counted; it never stops the rest of the batch.
    """

    def __init__(
        self,
        gateway,
        sms_sender: Optional[str],
        whatsapp_sender: Optional[str],
        cancel_event: Optional[threading.Event] = None,
    ):
        self.gateway = gateway
        self.sms_sender = sms_sender
        self.whatsapp_sender = whatsapp_sender
        self.cancel_event = cancel_event or threading.Event()

    def sender_for(self, channel: Channel) -> Optional[str]:
        if channel == Channel.WHATSAPP:
            return self.whatsapp_sender
        return self.sms_sender

    def send_reminders(
        self,
        db: Session,
        salon: Salon,
        event_type,
        customers: Sequence[Customer],
    ) -> DispatchResult:
        event_type = parse_event_type(event_type)
        try:
            template = get_active_template(db, salon.id, event_type.value)
        except SQLAlchemyError as e:
            raise LookupFailed(f"Failed to load {event_type.value} template for salon {salon.id}: {e}") from e
        if template is None:
            raise TemplateMissing(salon.id, event_type.value)

        result = DispatchResult()
        for customer in customers:
            if self.cancel_event.is_set():
                logger.warning(f"[Reminders] Salon {salon.id}: {event_type.value} batch cancelled")
                break

            phone = (customer.phone or "").strip()
            channel = select_channel(
                phone,
                whatsapp_enabled=bool(salon.whatsapp_notifications),
                sms_enabled=bool(salon.sms_notifications),
                whatsapp_sender=self.whatsapp_sender,
                sms_sender=self.sms_sender,
            )
            if channel is None:
                result.skipped += 1
                reminders_skipped_total.labels(event_type=event_type.value).inc()
                logger.info(
                    f"[Reminders] Salon {salon.id}: no channel for customer {customer.id}, skipping"
                )
                continue

            body = fill_template(template.message, customer.name)
            to = format_address(channel, phone)
            from_ = format_address(channel, self.sender_for(channel))
            try:
                sid = self.gateway.send(to, from_, body)
            except SendFailed as e:
                result.failed += 1
                reminders_failed_total.labels(channel=channel.value, event_type=event_type.value).inc()
                logger.error(f"[Reminders] Failed to send {event_type.value} reminder to {phone}: {e}")
                continue

            result.sent += 1
            result.delivery_ids.append(sid)
            reminders_sent_total.labels(channel=channel.value, event_type=event_type.value).inc()
            logger.info(f"[Reminders] Reminder sent to {phone} via {channel.value}, SID: {sid}")

        return result
