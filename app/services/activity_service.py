from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models import CaseActivity, Notification


def log_case_activity(
    db: Session,
    case_id: int,
    user_id: int,
    activity_type: str,
    description: str,
    metadata: Optional[Dict[str, Any]] = None
) -> CaseActivity:
    """Append an entry to the case audit trail. Caller commits."""
    activity = CaseActivity(
        case_id=case_id,
        user_id=user_id,
        activity_type=activity_type,
        description=description,
        activity_metadata=metadata
    )
    db.add(activity)
    return activity


def notify_user(
    db: Session,
    user_id: int,
    title: str,
    message: str,
    type: str,
    related_id: Optional[int] = None
) -> Notification:
    """Queue an in-app notification. Caller commits."""
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        related_id=related_id,
        is_read=False
    )
    db.add(notification)
    return notification
