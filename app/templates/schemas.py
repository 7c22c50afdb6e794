from pydantic import BaseModel, Field
from typing import Optional, Dict, List
from datetime import datetime

class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    template_content: str = Field(..., min_length=1)
    variables: Optional[str] = None

class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    template_content: Optional[str] = Field(None, min_length=1)
    variables: Optional[str] = None
    is_active: Optional[bool] = None

class TemplateResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str
    template_content: str
    variables: Optional[str] = None
    is_active: bool
    created_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TemplateRenderRequest(BaseModel):
    variables: Dict[str, str] = {}

class TemplateRenderResponse(BaseModel):
    content: str
    missing_variables: List[str]
