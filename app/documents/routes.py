import json
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, UploadFile, File, Form, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from sqlalchemy import or_, desc

from app.database import get_db
from app.errors import NotFoundError, BadRequestError
from app.models import User, Case, Document
from app.documents.schemas import DocumentUpdate, DocumentResponse, DocumentUploadResponse
from app.documents.storage import (
    LocalFileStorage, get_storage, is_allowed_file, guess_mime_type, MAX_FILE_SIZE
)
from app.services.activity_service import log_case_activity
from app.auth.dependencies import require_staff

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


def get_document_or_404(db: Session, document_id: int) -> Document:
    """Soft-deleted documents are treated as missing."""
    document = db.query(Document).filter(
        Document.id == document_id,
        Document.is_deleted.is_(False)
    ).first()
    if not document:
        raise NotFoundError("document_not_found")
    return document

def parse_tags(raw: Optional[str]) -> List[str]:
    """Tags arrive as a JSON array string or a comma separated list."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = raw.split(",")
    if not isinstance(parsed, list):
        parsed = [parsed]
    return [str(tag).strip() for tag in parsed if str(tag).strip()]

# =====================================================
# DOCUMENT CRUD OPERATIONS
# =====================================================

@router.post("/upload", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    case_id: int = Form(...),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),  # JSON string
    parent_document_id: Optional[int] = Form(None),
    current_user: User = Depends(require_staff()),
    storage: LocalFileStorage = Depends(get_storage),
    db: Session = Depends(get_db)
):
    """Upload a new document, or a new version of an existing one."""
    if not file.filename:
        raise BadRequestError("no_file_provided")
    if not is_allowed_file(file.filename):
        raise BadRequestError("file_type_not_allowed")

    if not db.query(Case).filter(Case.id == case_id).first():
        raise NotFoundError("case_not_found")

    version = 1
    if parent_document_id is not None:
        parent = get_document_or_404(db, parent_document_id)
        version = parent.version + 1

    content = await file.read()
    if len(content) > MAX_FILE_SIZE:
        raise BadRequestError("file_too_large")

    file_key = storage.build_key("documents", current_user.id, file.filename)
    url = storage.put(file_key, content)

    document = Document(
        case_id=case_id,
        title=title,
        description=description,
        file_key=file_key,
        file_url=url,
        file_name=file.filename,
        file_size=len(content),
        mime_type=guess_mime_type(file.filename, file.content_type),
        category=category,
        tags=parse_tags(tags),
        version=version,
        parent_document_id=parent_document_id,
        uploaded_by=current_user.id
    )
    db.add(document)
    db.flush()

    log_case_activity(db, case_id, current_user.id, "document_uploaded", f"Document uploaded: {title}")
    db.commit()
    db.refresh(document)

    logger.info("Document %s uploaded to case %s (%d bytes)", document.id, case_id, document.file_size)
    return DocumentUploadResponse(
        document=document,
        url=url,
        message="Document uploaded successfully"
    )

@router.get("/", response_model=List[DocumentResponse])
def list_documents(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    category: Optional[str] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """List documents with filtering and pagination."""
    query = db.query(Document).filter(Document.is_deleted.is_(False))
    if category:
        query = query.filter(Document.category == category)
    return query.order_by(desc(Document.created_at), desc(Document.id)).offset(skip).limit(limit).all()

@router.get("/search", response_model=List[DocumentResponse])
def search_documents(
    query: str = Query(..., min_length=1),
    case_id: Optional[int] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    pattern = f"%{query}%"
    q = db.query(Document).filter(
        Document.is_deleted.is_(False),
        or_(
            Document.title.ilike(pattern),
            Document.description.ilike(pattern),
            Document.file_name.ilike(pattern)
        )
    )
    if case_id is not None:
        q = q.filter(Document.case_id == case_id)
    return q.order_by(desc(Document.created_at), desc(Document.id)).all()

@router.get("/case/{case_id}", response_model=List[DocumentResponse])
def get_documents_by_case(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return db.query(Document).filter(
        Document.case_id == case_id,
        Document.is_deleted.is_(False)
    ).order_by(desc(Document.created_at), desc(Document.id)).all()

@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return get_document_or_404(db, document_id)

@router.put("/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: int,
    document_update: DocumentUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    document = get_document_or_404(db, document_id)

    update_data = document_update.dict(exclude_unset=True)
    for field, value in update_data.items():
        setattr(document, field, value)

    db.commit()
    db.refresh(document)
    return document

@router.delete("/{document_id}")
def delete_document(
    document_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Soft delete; the stored file is kept for the audit trail."""
    document = get_document_or_404(db, document_id)

    document.is_deleted = True
    document.deleted_at = datetime.utcnow()
    log_case_activity(
        db, document.case_id, current_user.id, "document_deleted", f"Document deleted: {document.title}"
    )
    db.commit()

    return {"success": True}

@router.get("/{document_id}/download")
def download_document(
    document_id: int,
    current_user: User = Depends(require_staff()),
    storage: LocalFileStorage = Depends(get_storage),
    db: Session = Depends(get_db)
):
    document = get_document_or_404(db, document_id)
    path = storage.path_for(document.file_key)
    if not path.exists():
        raise NotFoundError("document_not_found")
    return FileResponse(path, media_type=document.mime_type, filename=document.file_name)
