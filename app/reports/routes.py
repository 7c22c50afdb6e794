from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import BadRequestError
from app.models import User
from app.reports.schemas import DashboardReport, CaseProfitability, TeamProductivity
from app.services.report_service import ReportService
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/reports", tags=["Reports"])

@router.get("/dashboard", response_model=DashboardReport)
def get_dashboard(
    mine: bool = Query(False, description="Limit case and invoice figures to the caller's cases"),
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return ReportService(db).dashboard(current_user, mine=mine)

@router.get("/case-profitability/{case_id}", response_model=CaseProfitability)
def get_case_profitability(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return ReportService(db).case_profitability(case_id)

@router.get("/team-productivity", response_model=TeamProductivity)
def get_team_productivity(
    start_date: datetime,
    end_date: datetime,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    if end_date < start_date:
        raise BadRequestError("invalid_date_range")
    return ReportService(db).team_productivity(current_user, start_date, end_date)
