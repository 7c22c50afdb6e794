from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

class TimeEntryCreate(BaseModel):
    case_id: int
    description: str = Field(..., min_length=1)
    hours: Decimal = Field(..., gt=0, max_digits=5, decimal_places=2)
    rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    date: datetime
    is_billable: bool = True

class TimeEntryUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    hours: Optional[Decimal] = Field(None, gt=0, max_digits=5, decimal_places=2)
    rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    date: Optional[datetime] = None
    is_billable: Optional[bool] = None

class TimeEntryResponse(BaseModel):
    id: int
    case_id: int
    user_id: int
    description: str
    hours: Decimal
    rate: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    date: datetime
    is_billable: bool
    invoice_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
