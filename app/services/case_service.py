from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_, func, desc
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Dict, Any
from datetime import datetime
import uuid

from app.errors import NotFoundError, BadRequestError
from app.models import Case, CaseActivity, CaseStatus, Client, User
from app.cases.schemas import CaseCreate, CaseUpdate
from app.services.activity_service import log_case_activity, notify_user


def handled_by(user: User):
    """Cases the user opened or is assigned to."""
    return or_(Case.created_by == user.id, Case.assigned_to == user.id)


class CaseService:
    def __init__(self, db: Session):
        self.db = db

    def generate_case_number(self) -> str:
        """Generate a unique case number."""
        timestamp = datetime.now().strftime("%Y%m%d")
        unique_id = str(uuid.uuid4())[:8].upper()
        return f"CASE-{timestamp}-{unique_id}"

    def get_case(self, case_id: int) -> Case:
        case = self.db.query(Case).options(
            joinedload(Case.client)
        ).filter(Case.id == case_id).first()
        if not case:
            raise NotFoundError("case_not_found")
        return case

    def list_cases(
        self,
        status: Optional[CaseStatus] = None,
        skip: int = 0,
        limit: int = 100,
        user: Optional[User] = None
    ) -> List[Case]:
        query = self.db.query(Case)
        if status:
            query = query.filter(Case.status == status)
        if user is not None:
            query = query.filter(handled_by(user))
        return query.order_by(desc(Case.created_at), desc(Case.id)).offset(skip).limit(limit).all()

    def search_cases(self, text: str) -> List[Case]:
        pattern = f"%{text}%"
        return self.db.query(Case).filter(
            or_(
                Case.title.ilike(pattern),
                Case.description.ilike(pattern),
                Case.case_number.ilike(pattern),
                Case.opposing_party.ilike(pattern)
            )
        ).order_by(desc(Case.created_at), desc(Case.id)).all()

    def create_case(self, case_data: CaseCreate, current_user: User) -> Case:
        """Create a case, record the activity and notify the assignee."""
        if not self.db.query(Client).filter(Client.id == case_data.client_id).first():
            raise NotFoundError("client_not_found")

        data = case_data.dict()
        data["case_number"] = data.get("case_number") or self.generate_case_number()
        db_case = Case(**data, created_by=current_user.id)

        self.db.add(db_case)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise BadRequestError("case_number_taken")

        log_case_activity(self.db, db_case.id, current_user.id, "created", f"Case created: {db_case.title}")
        if db_case.assigned_to and db_case.assigned_to != current_user.id:
            notify_user(
                self.db,
                db_case.assigned_to,
                "New Case Assigned",
                f"You have been assigned to case: {db_case.title}",
                "case_update",
                db_case.id
            )

        self.db.commit()
        self.db.refresh(db_case)
        return db_case

    def update_case(self, case_id: int, case_update: CaseUpdate, current_user: User) -> Case:
        """Apply a partial update, logging status changes and reassignments."""
        case = self.get_case(case_id)
        old_status = case.status
        old_assignee = case.assigned_to

        update_data = case_update.dict(exclude_unset=True)
        for field, value in update_data.items():
            setattr(case, field, value)

        new_status = update_data.get("status")
        if new_status and new_status != old_status:
            log_case_activity(
                self.db, case.id, current_user.id, "status_changed",
                f"Status changed from {old_status.value} to {new_status.value}",
                {"from": old_status.value, "to": new_status.value}
            )
            if new_status == CaseStatus.CLOSED and not case.closing_date:
                case.closing_date = datetime.utcnow()

        new_assignee = update_data.get("assigned_to")
        if new_assignee and new_assignee != old_assignee:
            log_case_activity(
                self.db, case.id, current_user.id, "assigned",
                f"Case assigned to user {new_assignee}",
                {"assigned_to": new_assignee}
            )
            notify_user(
                self.db, new_assignee, "Case Assigned",
                f"You have been assigned to case: {case.title}", "case_update", case.id
            )

        self.db.commit()
        self.db.refresh(case)
        return case

    def get_activities(self, case_id: int) -> List[CaseActivity]:
        self.get_case(case_id)
        return self.db.query(CaseActivity).filter(
            CaseActivity.case_id == case_id
        ).order_by(desc(CaseActivity.created_at), desc(CaseActivity.id)).all()

    def get_case_stats(self) -> Dict[str, Any]:
        """Get case statistics for the office."""
        total_cases = self.db.query(Case).count()

        status_stats = self.db.query(Case.status, func.count(Case.id)).group_by(Case.status).all()
        by_status = {status.value: count for status, count in status_stats}

        priority_stats = self.db.query(Case.priority, func.count(Case.id)).group_by(Case.priority).all()
        by_priority = {priority.value: count for priority, count in priority_stats}

        upcoming_hearings = self.db.query(Case).filter(
            Case.hearing_date >= datetime.utcnow(),
            Case.status.in_([CaseStatus.ACTIVE, CaseStatus.PENDING])
        ).order_by(Case.hearing_date).limit(5).all()

        return {
            "total_cases": total_cases,
            "by_status": by_status,
            "by_priority": by_priority,
            "upcoming_hearings": upcoming_hearings
        }
