from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from app.models import InvoiceStatus

class InvoiceCreate(BaseModel):
    case_id: int
    client_id: int
    status: InvoiceStatus = InvoiceStatus.DRAFT
    subtotal: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    # Defaults to the configured VAT rate
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
    discount: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None

class InvoiceUpdate(BaseModel):
    status: Optional[InvoiceStatus] = None
    subtotal: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
    discount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None

class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus

class InvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    case_id: int
    client_id: int
    status: InvoiceStatus
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    discount: Decimal
    total: Decimal
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class InvoicePdfResponse(BaseModel):
    success: bool
    pdf_url: str
