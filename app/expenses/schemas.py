from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

class ExpenseCreate(BaseModel):
    case_id: int
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(None, max_length=100)
    date: datetime
    is_billable: bool = True
    # Base64 encoded image or PDF of the receipt
    receipt_data: Optional[str] = None
    receipt_file_name: Optional[str] = None

class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(None, max_length=100)
    date: Optional[datetime] = None
    is_billable: Optional[bool] = None

class ExpenseResponse(BaseModel):
    id: int
    case_id: int
    user_id: int
    description: str
    amount: Decimal
    category: Optional[str] = None
    date: datetime
    receipt_url: Optional[str] = None
    is_billable: bool
    invoice_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
