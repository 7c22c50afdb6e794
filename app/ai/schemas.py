from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal
from enum import Enum

class ExtractionType(str, Enum):
    ENTITIES = "entities"
    DATES = "dates"
    AMOUNTS = "amounts"
    PARTIES = "parties"

class ExtractRequest(BaseModel):
    document_id: int
    extraction_type: ExtractionType

class ExtractedItem(BaseModel):
    type: str
    value: str
    confidence: Optional[float] = None

class ExtractResponse(BaseModel):
    success: bool
    extraction_id: int
    items: List[ExtractedItem]

class ClassifyRequest(BaseModel):
    document_id: int

class Classification(BaseModel):
    category: str
    confidence: Optional[float] = None

class ClassifyResponse(BaseModel):
    success: bool
    classification: Classification

class LegalSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    context: Optional[str] = None

class LegalSearchResult(BaseModel):
    law_name: str
    article_number: str
    article_text: str
    relevance: str

class LegalSearchResponse(BaseModel):
    success: bool
    results: List[LegalSearchResult]

class GenerateDraftRequest(BaseModel):
    template_id: int
    variables: Dict[str, str] = {}

class GenerateDraftResponse(BaseModel):
    success: bool
    draft: str

class ExtractionResponse(BaseModel):
    id: int
    document_id: int
    extraction_type: str
    extracted_data: str
    confidence: Optional[Decimal] = None
    reviewed_by: Optional[int] = None
    is_approved: bool
    created_at: datetime

    class Config:
        from_attributes = True
