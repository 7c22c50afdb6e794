from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from app.models import SharePermission, AccessAction
from app.auth.schemas import check_password_bytes
from app.documents.schemas import DocumentResponse

class ShareCreate(BaseModel):
    document_id: int
    client_id: int
    password: Optional[str] = Field(None, min_length=1)
    permissions: SharePermission = SharePermission.VIEW
    expires_at: Optional[datetime] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return check_password_bytes(value)

class ShareCreated(BaseModel):
    success: bool
    share_id: int
    share_token: str
    share_url: str

class ShareAccessRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: Optional[str] = None

class SharedDocumentView(BaseModel):
    success: bool
    document: DocumentResponse
    permissions: SharePermission

class ShareResponse(BaseModel):
    """A link as seen by office staff. The token itself is not echoed back."""
    id: int
    document_id: int
    client_id: int
    permissions: SharePermission
    password_protected: bool
    expires_at: Optional[datetime] = None
    access_count: int
    last_accessed_at: Optional[datetime] = None
    created_by: int
    created_at: datetime

class AccessLogResponse(BaseModel):
    id: int
    document_id: int
    user_id: Optional[int] = None
    client_id: Optional[int] = None
    action: AccessAction
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
