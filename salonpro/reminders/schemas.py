from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class NotificationTestRequest(BaseModel):
    phone: str
    channel: str
    message: Optional[str] = None
    salon_id: Optional[UUID] = None


class NotificationTestResponse(BaseModel):
    message: str
    channel: str
    phone: str
    body: str
    sid: Optional[str] = None


class RunQueued(BaseModel):
    status: str
    run_date: Optional[str] = None
