from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from app.models import ClientType, ClientStatus

class ClientBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    national_id: Optional[str] = Field(None, max_length=20)
    company_name: Optional[str] = None
    company_registration: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

class ClientCreate(ClientBase):
    status: ClientStatus = ClientStatus.ACTIVE

class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    national_id: Optional[str] = Field(None, max_length=20)
    company_name: Optional[str] = None
    company_registration: Optional[str] = Field(None, max_length=50)
    type: Optional[ClientType] = None
    status: Optional[ClientStatus] = None
    notes: Optional[str] = None

class ClientResponse(ClientBase):
    id: int
    type: ClientType
    status: ClientStatus
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
