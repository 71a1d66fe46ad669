#!/usr/bin/env python3
"""
Run the birthday/anniversary reminder pass by hand, or send a test message.

Usage:
    # One pass over all salons for today
    python scripts/send_reminders.py

    # One salon, pretending today is 2025-12-25
    python scripts/send_reminders.py --salon-id 3f0c... --date 2025-12-25

    # Single test message
    python scripts/send_reminders.py --test-phone +919799570493 --channel whatsapp --message "Hello [CustomerName]"
"""
import sys
import os
import argparse
import logging
from datetime import date
from uuid import UUID

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from salonpro.core.config import settings
from salonpro.reminders.errors import ReminderError
from salonpro.reminders.service import ReminderService

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("send_reminders")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Send birthday and anniversary reminders")
    parser.add_argument("--date", type=date.fromisoformat, help="Run as if today were this date (YYYY-MM-DD)")
    parser.add_argument("--salon-id", type=UUID, help="Only process this salon")
    parser.add_argument("--test-phone", help="Send a single test message to this number instead")
    parser.add_argument("--channel", default="sms", help="sms or whatsapp (test message only)")
    parser.add_argument("--message", help="Test message body; defaults to the salon's template")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    service = ReminderService()

    if args.test_phone:
        try:
            body = service.resolve_test_body(args.salon_id, args.message)
            sid = service.send_test_message(args.test_phone, body, args.channel)
        except ReminderError as e:
            logger.error(f"Test message failed: {e}")
            return 1
        print(f"✅ Test {args.channel} sent to {args.test_phone} (SID: {sid})")
        print(f"   Body: {body}")
        return 0

    if not service.configured:
        logger.error("Twilio not configured; set TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN")
        return 1

    if args.salon_id:
        outcome = service.process_salon_reminders(args.salon_id, today=args.date)
        print(f"Salon {outcome.salon_id}: sent={outcome.sent} failed={outcome.failed} skipped={outcome.skipped}")
        if outcome.skipped_reason:
            print(f"   Not processed: {outcome.skipped_reason}")
        return 0 if outcome.failures == 0 else 1

    summary = service.send_daily_reminders(today=args.date)
    if summary.already_running:
        logger.error("A daily reminder run is already in progress")
        return 1
    print("=" * 60)
    print(f"Run date:          {summary.run_date}")
    print(f"Salons processed:  {summary.salons_processed}/{summary.salons_seen}")
    print(f"Messages sent:     {summary.sent}")
    print(f"Messages failed:   {summary.failed}")
    print(f"Customers skipped: {summary.skipped}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
