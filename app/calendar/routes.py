from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import NotFoundError, BadRequestError
from app.models import User, Case, CalendarEvent
from app.calendar.schemas import CalendarEventCreate, CalendarEventUpdate, CalendarEventResponse
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/calendar", tags=["Calendar"])


def get_event_or_404(db: Session, event_id: int) -> CalendarEvent:
    event = db.query(CalendarEvent).filter(CalendarEvent.id == event_id).first()
    if not event:
        raise NotFoundError("event_not_found")
    return event

def check_date_range(start_date: datetime, end_date: datetime) -> None:
    if end_date < start_date:
        raise BadRequestError("invalid_date_range")

@router.get("/events", response_model=List[CalendarEventResponse])
def get_events(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Events created by the current user, optionally limited to a window."""
    query = db.query(CalendarEvent).filter(CalendarEvent.created_by == current_user.id)
    if start_date:
        query = query.filter(CalendarEvent.start_date >= start_date)
    if end_date:
        query = query.filter(CalendarEvent.start_date <= end_date)
    return query.order_by(CalendarEvent.start_date).all()

@router.get("/events/{event_id}", response_model=CalendarEventResponse)
def get_event(
    event_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return get_event_or_404(db, event_id)

@router.post("/events", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    event_data: CalendarEventCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    check_date_range(event_data.start_date, event_data.end_date)
    if event_data.case_id is not None and not db.query(Case).filter(Case.id == event_data.case_id).first():
        raise NotFoundError("case_not_found")

    event = CalendarEvent(**event_data.dict(), created_by=current_user.id)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event

@router.put("/events/{event_id}", response_model=CalendarEventResponse)
def update_event(
    event_id: int,
    event_update: CalendarEventUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    event = get_event_or_404(db, event_id)

    update_data = event_update.dict(exclude_unset=True)
    check_date_range(
        update_data.get("start_date") or event.start_date,
        update_data.get("end_date") or event.end_date
    )
    for field, value in update_data.items():
        if field in ("start_date", "end_date") and value is None:
            continue
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    return event

@router.delete("/events/{event_id}")
def delete_event(
    event_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    event = get_event_or_404(db, event_id)
    db.delete(event)
    db.commit()
    return {"success": True}
