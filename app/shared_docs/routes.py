from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import NotFoundError
from app.models import User, SharedDocument, AccessAction
from app.shared_docs.schemas import (
    ShareCreate, ShareCreated, ShareAccessRequest, SharedDocumentView, ShareResponse, AccessLogResponse
)
from app.documents.storage import LocalFileStorage, get_storage
from app.services.sharing_service import SharingService
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/shared-docs", tags=["Shared Documents"])


def share_to_response(share: SharedDocument) -> ShareResponse:
    return ShareResponse(
        id=share.id,
        document_id=share.document_id,
        client_id=share.client_id,
        permissions=share.permissions,
        password_protected=bool(share.password_hash),
        expires_at=share.expires_at,
        access_count=share.access_count,
        last_accessed_at=share.last_accessed_at,
        created_by=share.created_by,
        created_at=share.created_at
    )

def request_origin(request: Request):
    ip_address = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")

# =====================================================
# STAFF SIDE
# =====================================================

@router.post("/", response_model=ShareCreated, status_code=status.HTTP_201_CREATED)
def create_share(
    share_data: ShareCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Create a share link for a client."""
    share, url = SharingService(db).create_share(
        document_id=share_data.document_id,
        client_id=share_data.client_id,
        current_user=current_user,
        permissions=share_data.permissions,
        password=share_data.password,
        expires_at=share_data.expires_at
    )
    return ShareCreated(success=True, share_id=share.id, share_token=share.share_token, share_url=url)

@router.get("/document/{document_id}", response_model=List[ShareResponse])
def list_document_shares(
    document_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return [share_to_response(share) for share in SharingService(db).list_shares(document_id)]

@router.get("/document/{document_id}/access-logs", response_model=List[AccessLogResponse])
def get_access_logs(
    document_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return SharingService(db).access_logs(document_id)

@router.delete("/{share_id}")
def revoke_share(
    share_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    SharingService(db).revoke_share(share_id)
    return {"success": True}

# =====================================================
# PUBLIC SIDE (the token is the credential)
# =====================================================

@router.post("/resolve", response_model=SharedDocumentView)
def resolve_share(
    access: ShareAccessRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    ip_address, user_agent = request_origin(request)
    share = SharingService(db).resolve_share(
        access.token, access.password, ip_address=ip_address, user_agent=user_agent
    )
    return SharedDocumentView(success=True, document=share.document, permissions=share.permissions)

@router.post("/download")
def download_shared_document(
    access: ShareAccessRequest,
    request: Request,
    storage: LocalFileStorage = Depends(get_storage),
    db: Session = Depends(get_db)
):
    """Stream the file behind a link that grants download or edit rights."""
    ip_address, user_agent = request_origin(request)
    share = SharingService(db).resolve_share(
        access.token, access.password,
        ip_address=ip_address, user_agent=user_agent, action=AccessAction.DOWNLOAD
    )
    document = share.document
    path = storage.path_for(document.file_key)
    if not path.exists():
        raise NotFoundError("document_not_found")
    return FileResponse(path, media_type=document.mime_type, filename=document.file_name)
