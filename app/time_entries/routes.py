from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.database import get_db
from app.errors import NotFoundError, BadRequestError
from app.models import User, Case, TimeEntry
from app.time_entries.schemas import TimeEntryCreate, TimeEntryUpdate, TimeEntryResponse
from app.services.invoice_service import to_money
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/time-entries", tags=["Time Entries"])


def get_time_entry_or_404(db: Session, entry_id: int) -> TimeEntry:
    entry = db.query(TimeEntry).filter(TimeEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError("time_entry_not_found")
    return entry

def billed_amount(hours, rate):
    """hours x rate in cents, or None when no rate is set."""
    if rate is None:
        return None
    return to_money(hours * rate)

@router.get("/case/{case_id}", response_model=List[TimeEntryResponse])
def get_time_entries_by_case(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return db.query(TimeEntry).filter(TimeEntry.case_id == case_id).order_by(
        desc(TimeEntry.date), desc(TimeEntry.id)
    ).all()

@router.get("/mine", response_model=List[TimeEntryResponse])
def get_my_time_entries(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    if start_date and end_date and end_date < start_date:
        raise BadRequestError("invalid_date_range")
    query = db.query(TimeEntry).filter(TimeEntry.user_id == current_user.id)
    if start_date:
        query = query.filter(TimeEntry.date >= start_date)
    if end_date:
        query = query.filter(TimeEntry.date <= end_date)
    return query.order_by(desc(TimeEntry.date), desc(TimeEntry.id)).all()

@router.post("/", response_model=TimeEntryResponse, status_code=status.HTTP_201_CREATED)
def create_time_entry(
    entry_data: TimeEntryCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    if not db.query(Case).filter(Case.id == entry_data.case_id).first():
        raise NotFoundError("case_not_found")

    entry = TimeEntry(
        **entry_data.dict(),
        user_id=current_user.id,
        amount=billed_amount(entry_data.hours, entry_data.rate)
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry

@router.put("/{entry_id}", response_model=TimeEntryResponse)
def update_time_entry(
    entry_id: int,
    entry_update: TimeEntryUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    entry = get_time_entry_or_404(db, entry_id)

    update_data = entry_update.dict(exclude_unset=True)
    if update_data.get("hours", 0) is None:
        del update_data["hours"]
    for field, value in update_data.items():
        setattr(entry, field, value)

    if "hours" in update_data or "rate" in update_data:
        entry.amount = billed_amount(entry.hours, entry.rate)

    db.commit()
    db.refresh(entry)
    return entry
