from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    tags: Optional[List[str]] = None

class DocumentResponse(BaseModel):
    id: int
    case_id: int
    title: str
    description: Optional[str] = None
    file_key: str
    file_url: str
    file_name: str
    file_size: int
    mime_type: str
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    version: int
    parent_document_id: Optional[int] = None
    uploaded_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Upload response
class DocumentUploadResponse(BaseModel):
    document: DocumentResponse
    url: str
    message: str
