from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import User, Client
from app.client_portal.schemas import (
    PortalLogin, PortalLoginResponse, SetPasswordRequest, VerifyTokenResponse,
    InviteCreate, InviteResponse, MessageCreate, StaffMessageCreate, MessageResponse,
    PortalDashboard
)
from app.clients.routes import get_client_or_404
from app.cases.schemas import CaseResponse
from app.invoices.schemas import InvoiceResponse
from app.services.client_portal_service import ClientPortalService
from app.auth.dependencies import get_current_client, require_staff

router = APIRouter(prefix="/client-auth", tags=["Client Portal"])
admin_router = APIRouter(prefix="/client-portal-admin", tags=["Client Portal Admin"])

# =====================================================
# PORTAL AUTHENTICATION
# =====================================================

@router.post("/login", response_model=PortalLoginResponse)
def portal_login(credentials: PortalLogin, db: Session = Depends(get_db)):
    return ClientPortalService(db).login(credentials.email, credentials.password)

@router.post("/set-password")
def set_password(request: SetPasswordRequest, db: Session = Depends(get_db)):
    """Consume an invite token and activate portal access."""
    ClientPortalService(db).set_password(request.token, request.password)
    return {"success": True}

@router.get("/verify-token", response_model=VerifyTokenResponse)
def verify_invite_token(token: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return ClientPortalService(db).verify_invite(token)

# =====================================================
# CLIENT VIEWS
# =====================================================

@router.get("/dashboard", response_model=PortalDashboard)
def get_dashboard(
    client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).dashboard(client)

@router.get("/cases", response_model=List[CaseResponse])
def get_cases(
    client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).cases(client)

@router.get("/invoices", response_model=List[InvoiceResponse])
def get_invoices(
    client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).invoices(client)

@router.get("/messages", response_model=List[MessageResponse])
def get_messages(
    client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).messages(client)

@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    message: MessageCreate,
    client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).send_client_message(client, message.message)

@router.put("/messages/{message_id}/read", response_model=MessageResponse)
def mark_message_read(
    message_id: int,
    client: Client = Depends(get_current_client),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).mark_message_read(client, message_id)

# =====================================================
# STAFF ADMINISTRATION
# =====================================================

@admin_router.post("/invite", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
def create_invite(
    invite: InviteCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).create_invite(invite.client_id, invite.expiry_days)

@admin_router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message_to_client(
    message: StaffMessageCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return ClientPortalService(db).send_staff_message(message.client_id, current_user, message.message)

@admin_router.get("/messages/{client_id}", response_model=List[MessageResponse])
def get_client_messages(
    client_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    client = get_client_or_404(db, client_id)
    return ClientPortalService(db).messages(client)

@admin_router.post("/{client_id}/deactivate")
def deactivate_access(
    client_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    ClientPortalService(db).deactivate(client_id)
    return {"success": True}
