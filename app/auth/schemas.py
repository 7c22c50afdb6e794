from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from app.models import UserRole

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

def check_password_bytes(value: Optional[str]) -> Optional[str]:
    """Reject passwords bcrypt would truncate; Arabic letters take two bytes each."""
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return value

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    role: UserRole = UserRole.LAWYER
    phone: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return check_password_bytes(value)

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    subject: Optional[str] = None
    role: Optional[str] = None
    kind: str = "staff"

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool
    last_signed_in: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class UserBasic(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True
