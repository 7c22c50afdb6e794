from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.database import get_db
from app.errors import NotFoundError
from app.models import User, Notification
from app.notifications.schemas import NotificationResponse, UnreadCount
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/notifications", tags=["Notifications"])

@router.get("/", response_model=List[NotificationResponse])
def list_notifications(
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return db.query(Notification).filter(
        Notification.user_id == current_user.id
    ).order_by(desc(Notification.created_at), desc(Notification.id)).limit(50).all()

@router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    count = db.query(Notification).filter(
        Notification.user_id == current_user.id,
        Notification.is_read.is_(False)
    ).count()
    return UnreadCount(count=count)

@router.put("/{notification_id}/read")
def mark_as_read(
    notification_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    # Other users' notifications look missing
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == current_user.id
    ).first()
    if not notification:
        raise NotFoundError("notification_not_found")

    notification.is_read = True
    db.commit()
    return {"success": True}

@router.put("/read-all")
def mark_all_as_read(
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    updated = db.query(Notification).filter(
        Notification.user_id == current_user.id,
        Notification.is_read.is_(False)
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return {"success": True, "updated": updated}
