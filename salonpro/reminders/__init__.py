"""Birthday and anniversary reminders (resolver, channel policy, dispatcher, scheduler).

The service scans every salon once a day, picks the customers whose birthday
or anniversary falls within the next week and sends the salon's template over
WhatsApp or SMS through Twilio. It can run in-process next to the API
(APScheduler) or as a Celery worker + beat.
"""
