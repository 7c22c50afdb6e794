from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models import User, CaseStatus
from app.cases.schemas import (
    CaseCreate, CaseUpdate, CaseResponse, CaseDetailResponse,
    CaseActivityResponse, CaseStats
)
from app.services.case_service import CaseService
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/cases", tags=["Cases"])

# =====================================================
# CASE CRUD OPERATIONS
# =====================================================

@router.get("/", response_model=List[CaseResponse])
def list_cases(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    status: Optional[CaseStatus] = None,
    mine: bool = False,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """List cases, newest first. With mine=true only the caller's own or assigned cases."""
    return CaseService(db).list_cases(
        status=status, skip=skip, limit=limit, user=current_user if mine else None
    )

@router.get("/search", response_model=List[CaseResponse])
def search_cases(
    query: str = Query(..., min_length=1),
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return CaseService(db).search_cases(query)

@router.get("/status/{case_status}", response_model=List[CaseResponse])
def get_cases_by_status(
    case_status: CaseStatus,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return CaseService(db).list_cases(status=case_status)

@router.get("/stats/overview", response_model=CaseStats)
def get_case_stats(
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Get case statistics overview."""
    return CaseService(db).get_case_stats()

@router.get("/{case_id}", response_model=CaseDetailResponse)
def get_case(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return CaseService(db).get_case(case_id)

@router.post("/", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
def create_case(
    case_data: CaseCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Create a new case."""
    return CaseService(db).create_case(case_data, current_user)

@router.put("/{case_id}", response_model=CaseResponse)
def update_case(
    case_id: int,
    case_update: CaseUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Update a case."""
    return CaseService(db).update_case(case_id, case_update, current_user)

# =====================================================
# CASE ACTIVITY LOG
# =====================================================

@router.get("/{case_id}/activities", response_model=List[CaseActivityResponse])
def get_case_activities(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return CaseService(db).get_activities(case_id)
