from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.models import ClientType, SenderType, SharePermission
from app.auth.schemas import check_password_bytes
from app.cases.schemas import CaseResponse
from app.invoices.schemas import InvoiceResponse

# Auth
class PortalLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class PortalClient(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    type: ClientType

    class Config:
        from_attributes = True

class PortalLoginResponse(BaseModel):
    success: bool
    client: PortalClient
    access_token: str
    token_type: str

class SetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return check_password_bytes(value)

class VerifyTokenResponse(BaseModel):
    valid: bool
    client_name: str
    client_email: Optional[str] = None

# Invites (staff side)
class InviteCreate(BaseModel):
    client_id: int
    expiry_days: int = Field(7, ge=1, le=90)

class InviteResponse(BaseModel):
    success: bool
    invite_token: str
    invite_link: str
    expires_at: datetime

# Messages
class MessageCreate(BaseModel):
    message: str = Field(..., min_length=1)

class StaffMessageCreate(MessageCreate):
    client_id: int

class MessageResponse(BaseModel):
    id: int
    client_id: int
    sender_id: int
    sender_type: SenderType
    message: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True

# Dashboard
class PortalSharedDocument(BaseModel):
    id: int
    document_id: int
    permissions: SharePermission
    expires_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class PortalStats(BaseModel):
    total_cases: int
    active_cases: int
    total_invoices: int
    pending_invoices: int
    shared_documents: int
    unread_messages: int

class PortalDashboard(BaseModel):
    client: PortalClient
    stats: PortalStats
    recent_cases: List[CaseResponse]
    recent_invoices: List[InvoiceResponse]
    recent_documents: List[PortalSharedDocument]
