from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from .channels import parse_channel
from .errors import ConfigurationMissing, InvalidArgument, LookupFailed, SendFailed
from .schemas import NotificationTestRequest, NotificationTestResponse, RunQueued
from .service import ReminderService


router = APIRouter()


def get_service(request: Request) -> ReminderService:
    return request.app.state.reminder_service


@router.post("/test", response_model=NotificationTestResponse)
def send_test_notification(payload: NotificationTestRequest, service: ReminderService = Depends(get_service)):
    try:
        channel = parse_channel(payload.channel)
    except InvalidArgument:
        raise HTTPException(status_code=400, detail="channel must be 'sms' or 'whatsapp'")
    phone = payload.phone.strip()
    if not phone:
        raise HTTPException(status_code=400, detail="phone is required (E.164 format, e.g. +919799570493)")

    try:
        body = service.resolve_test_body(payload.salon_id, payload.message)
    except LookupFailed:
        raise HTTPException(status_code=500, detail="Failed to fetch reminder templates")

    try:
        sid = service.send_test_message(phone, body, channel)
    except ConfigurationMissing as e:
        raise HTTPException(status_code=503, detail=f"Failed to send test notification: {e}")
    except SendFailed as e:
        raise HTTPException(status_code=502, detail=f"Failed to send test notification: {e}")

    return NotificationTestResponse(
        message=f"Test {channel.value} sent successfully",
        channel=channel.value,
        phone=phone,
        body=body,
        sid=sid,
    )


@router.post("/run", response_model=RunQueued, status_code=202)
def trigger_daily_run(background_tasks: BackgroundTasks, service: ReminderService = Depends(get_service)):
    if not service.configured:
        raise HTTPException(status_code=503, detail="Twilio not configured; set TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN")
    if service.running:
        raise HTTPException(status_code=409, detail="A daily reminder run is already in progress")
    background_tasks.add_task(service.send_daily_reminders)
    return RunQueued(status="queued")


@router.get("/health")
def health_check(request: Request):
    scheduler = getattr(request.app.state, "reminder_scheduler", None)
    return {
        "status": "healthy",
        "service": "reminders",
        "scheduler": scheduler.state.value if scheduler else None,
    }
