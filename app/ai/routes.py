import json
import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.database import get_db
from app.errors import NotFoundError, UpstreamServiceError
from app.models import User, AIExtraction
from app.ai.schemas import (
    ExtractRequest, ExtractResponse, ExtractedItem,
    ClassifyRequest, ClassifyResponse, Classification,
    LegalSearchRequest, LegalSearchResponse, LegalSearchResult,
    GenerateDraftRequest, GenerateDraftResponse, ExtractionResponse
)
from app.documents.routes import get_document_or_404
from app.templates.routes import get_template_or_404
from app.services.llm_service import LLMService, get_llm_service, average_confidence
from app.services.template_service import render_template
from app.auth.dependencies import require_staff

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])

DOCUMENT_CATEGORIES = {
    "عقد": "Contract",
    "حكم": "Judgment",
    "مذكرة": "Memorandum",
    "لائحة": "Petition",
    "دليل": "Evidence",
    "مراسلات": "Correspondence",
}

EXTRACTION_SYSTEM_PROMPT = (
    "You are a legal document analysis AI. Extract information accurately and return valid JSON."
)
CLASSIFIER_SYSTEM_PROMPT = "You are a legal document classifier. Classify documents accurately."
SEARCH_SYSTEM_PROMPT = (
    "You are a Saudi legal research assistant. Provide accurate legal information based on Saudi law."
)
DRAFTING_SYSTEM_PROMPT = (
    "You are a legal document drafting assistant. Enhance legal documents professionally."
)


def parse_model_list(model_cls, raw_items) -> list:
    if not isinstance(raw_items, list):
        raise UpstreamServiceError("ai_invalid_response")
    try:
        return [model_cls(**item) for item in raw_items]
    except (TypeError, ValidationError):
        raise UpstreamServiceError("ai_invalid_response")

@router.post("/extract", response_model=ExtractResponse)
def extract_data(
    request: ExtractRequest,
    current_user: User = Depends(require_staff()),
    llm: LLMService = Depends(get_llm_service),
    db: Session = Depends(get_db)
):
    """Pull entities, dates, amounts or parties out of a document and keep the result for review."""
    document = get_document_or_404(db, request.document_id)
    kind = request.extraction_type.value

    prompt = f"""Extract {kind} from the following legal document. Return as JSON.

Document: {document.title}
Type: {document.category or "Unknown"}
Description: {document.description or ""}

Return a JSON object of the form
{{"extracted_items": [{{"type": "...", "value": "...", "confidence": 0.0}}]}}"""

    data = llm.complete_json(EXTRACTION_SYSTEM_PROMPT, prompt)
    items = parse_model_list(ExtractedItem, data.get("extracted_items", []))

    extraction = AIExtraction(
        document_id=document.id,
        extraction_type=kind,
        extracted_data=json.dumps({"extracted_items": [item.dict() for item in items]}, ensure_ascii=False),
        confidence=average_confidence([item.confidence for item in items]),
        is_approved=False
    )
    db.add(extraction)
    db.commit()
    db.refresh(extraction)

    return ExtractResponse(success=True, extraction_id=extraction.id, items=items)

@router.post("/classify", response_model=ClassifyResponse)
def classify_document(
    request: ClassifyRequest,
    current_user: User = Depends(require_staff()),
    llm: LLMService = Depends(get_llm_service),
    db: Session = Depends(get_db)
):
    """Classify a document and store the category on it."""
    document = get_document_or_404(db, request.document_id)

    categories = "\n".join(f"- {ar} ({en})" for ar, en in DOCUMENT_CATEGORIES.items())
    prompt = f"""Classify this legal document into one of these categories:
{categories}

Document title: {document.title}
Current category: {document.category or "Unknown"}

Return the classification as JSON: {{"category": "<arabic category>", "confidence": 0.0}}"""

    data = llm.complete_json(CLASSIFIER_SYSTEM_PROMPT, prompt)
    try:
        classification = Classification(**data)
    except ValidationError:
        raise UpstreamServiceError("ai_invalid_response")

    document.category = classification.category
    db.add(AIExtraction(
        document_id=document.id,
        extraction_type="classification",
        extracted_data=json.dumps(classification.dict(), ensure_ascii=False),
        confidence=average_confidence([classification.confidence]),
        is_approved=False
    ))
    db.commit()

    logger.info(f"Document {document.id} classified as {classification.category}")
    return ClassifyResponse(success=True, classification=classification)

@router.post("/legal-search", response_model=LegalSearchResponse)
def legal_search(
    request: LegalSearchRequest,
    current_user: User = Depends(require_staff()),
    llm: LLMService = Depends(get_llm_service)
):
    context = f"\nContext: {request.context}\n" if request.context else ""
    prompt = f"""Search for relevant Saudi Arabian laws and regulations related to: {request.query}
{context}
Provide:
1. Relevant law articles
2. Brief explanation
3. Application to the query

Return JSON: {{"results": [{{"law_name": "", "article_number": "", "article_text": "", "relevance": ""}}]}}"""

    data = llm.complete_json(SEARCH_SYSTEM_PROMPT, prompt)
    results = parse_model_list(LegalSearchResult, data.get("results", []))
    return LegalSearchResponse(success=True, results=results)

@router.post("/generate-draft", response_model=GenerateDraftResponse)
def generate_draft(
    request: GenerateDraftRequest,
    current_user: User = Depends(require_staff()),
    llm: LLMService = Depends(get_llm_service),
    db: Session = Depends(get_db)
):
    """Fill a template and have the model polish the result."""
    template = get_template_or_404(db, request.template_id)
    content = render_template(template.template_content, request.variables)

    prompt = f"""Review and enhance this legal document draft. Ensure it is professional, legally sound, and complete.

Template: {template.name}
Category: {template.category}

Draft:
{content}

Return the enhanced draft."""

    draft = llm.complete(DRAFTING_SYSTEM_PROMPT, prompt, temperature=0.3, max_tokens=3000)
    return GenerateDraftResponse(success=True, draft=draft)

@router.get("/extractions/{document_id}", response_model=List[ExtractionResponse])
def get_extractions(
    document_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return db.query(AIExtraction).filter(
        AIExtraction.document_id == document_id
    ).order_by(desc(AIExtraction.created_at), desc(AIExtraction.id)).all()

@router.put("/extractions/{extraction_id}/approve", response_model=ExtractionResponse)
def approve_extraction(
    extraction_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    extraction = db.query(AIExtraction).filter(AIExtraction.id == extraction_id).first()
    if not extraction:
        raise NotFoundError("extraction_not_found")

    extraction.is_approved = True
    extraction.reviewed_by = current_user.id
    db.commit()
    db.refresh(extraction)
    return extraction
