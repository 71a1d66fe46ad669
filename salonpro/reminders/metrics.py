from prometheus_client import Counter


reminder_runs_total = Counter(
    "reminder_runs_total",
    "Total daily reminder runs started",
)

reminder_salons_processed_total = Counter(
    "reminder_salons_processed_total",
    "Salons whose reminders were processed",
)

reminder_salons_skipped_total = Counter(
    "reminder_salons_skipped_total",
    "Salons skipped during a run",
    ["reason"],
)

reminder_salon_failures_total = Counter(
    "reminder_salon_failures_total",
    "Salon/event units aborted by a lookup error or missing template",
    ["reason"],
)

reminders_sent_total = Counter(
    "reminders_sent_total",
    "Reminder messages accepted by the gateway",
    ["channel", "event_type"],
)

reminders_failed_total = Counter(
    "reminders_failed_total",
    "Reminder messages rejected by the gateway or lost to a network error",
    ["channel", "event_type"],
)

reminders_skipped_total = Counter(
    "reminders_skipped_total",
    "Customers not notified because no channel was eligible",
    ["event_type"],
)
