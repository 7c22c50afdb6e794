from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.models import EventType, EventStatus

class CalendarEventCreate(BaseModel):
    case_id: Optional[int] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    event_type: EventType = EventType.OTHER
    status: EventStatus = EventStatus.SCHEDULED
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    attendees: Optional[str] = None
    reminder_minutes: int = Field(30, ge=0)

class CalendarEventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    event_type: Optional[EventType] = None
    status: Optional[EventStatus] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    attendees: Optional[str] = None
    reminder_minutes: Optional[int] = Field(None, ge=0)

class CalendarEventResponse(BaseModel):
    id: int
    case_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    event_type: EventType
    status: EventStatus
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    attendees: Optional[str] = None
    reminder_minutes: Optional[int] = None
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
