from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from app.models import CaseStatus, PriorityLevel
from app.clients.schemas import ClientResponse

# Base schemas
class CaseBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    case_type: str = Field(..., min_length=1, max_length=100)
    priority: PriorityLevel = PriorityLevel.MEDIUM

    # Court details
    court: Optional[str] = None
    judge: Optional[str] = None
    opposing_party: Optional[str] = None
    opposing_lawyer: Optional[str] = None
    filing_date: Optional[datetime] = None
    hearing_date: Optional[datetime] = None

class CaseCreate(CaseBase):
    case_number: Optional[str] = Field(None, min_length=1, max_length=50)
    client_id: int
    status: CaseStatus = CaseStatus.ACTIVE
    assigned_to: Optional[int] = None

class CaseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    case_type: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[CaseStatus] = None
    priority: Optional[PriorityLevel] = None
    court: Optional[str] = None
    judge: Optional[str] = None
    opposing_party: Optional[str] = None
    opposing_lawyer: Optional[str] = None
    filing_date: Optional[datetime] = None
    hearing_date: Optional[datetime] = None
    closing_date: Optional[datetime] = None
    assigned_to: Optional[int] = None

class CaseResponse(CaseBase):
    id: int
    case_number: str
    client_id: int
    status: CaseStatus
    closing_date: Optional[datetime] = None
    assigned_to: Optional[int] = None
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CaseDetailResponse(CaseResponse):
    client: Optional[ClientResponse] = None

class CaseActivityResponse(BaseModel):
    id: int
    case_id: int
    user_id: int
    activity_type: str
    description: str
    activity_metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True

class CaseStats(BaseModel):
    total_cases: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    upcoming_hearings: List[CaseResponse]
