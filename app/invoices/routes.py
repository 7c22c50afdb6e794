from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models import User, InvoiceStatus
from app.invoices.schemas import (
    InvoiceCreate, InvoiceUpdate, InvoiceStatusUpdate, InvoiceResponse, InvoicePdfResponse
)
from app.services.invoice_service import InvoiceService
from app.auth.dependencies import require_staff, require_lawyer_or_admin

router = APIRouter(prefix="/invoices", tags=["Invoices"])

@router.get("/", response_model=List[InvoiceResponse])
def list_invoices(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    status: Optional[InvoiceStatus] = None,
    client_id: Optional[int] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return InvoiceService(db).list_invoices(status=status, client_id=client_id, skip=skip, limit=limit)

@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return InvoiceService(db).get_invoice(invoice_id)

@router.post("/", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: InvoiceCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Create an invoice. Tax and total are always derived from the amounts."""
    return InvoiceService(db).create_invoice(invoice_data, current_user)

@router.put("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: int,
    invoice_update: InvoiceUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return InvoiceService(db).update_invoice(invoice_id, invoice_update)

@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
def set_invoice_status(
    invoice_id: int,
    status_update: InvoiceStatusUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return InvoiceService(db).set_status(invoice_id, status_update.status)

@router.delete("/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    current_user: User = Depends(require_lawyer_or_admin()),
    db: Session = Depends(get_db)
):
    InvoiceService(db).delete_invoice(invoice_id)
    return {"success": True}

@router.post("/{invoice_id}/pdf", response_model=InvoicePdfResponse)
def generate_invoice_pdf(
    invoice_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Return the link the printable invoice is downloaded from."""
    invoice = InvoiceService(db).get_invoice(invoice_id)
    return InvoicePdfResponse(success=True, pdf_url=f"{router.prefix}/{invoice.id}/pdf")

@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(
    invoice_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    invoice, content = InvoiceService(db).render_pdf(invoice_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{invoice.invoice_number}.pdf"'}
    )
