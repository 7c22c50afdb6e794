"""
Invoice engine.

Money is handled as Decimal and rounded half-up to two places. Totals are
derived from subtotal, tax rate and discount whenever any of the three is
supplied, and the status lifecycle is enforced through ALLOWED_TRANSITIONS.
"""
import logging
import secrets
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy import desc

from app import config
from app.errors import NotFoundError, BadRequestError
from app.models import Invoice, InvoiceStatus, Case, Client, User
from app.invoices.schemas import InvoiceCreate, InvoiceUpdate
from app.services.invoice_pdf import render_invoice_pdf

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
AMOUNT_FIELDS = ("subtotal", "tax_rate", "discount")

ALLOWED_TRANSITIONS = {
    InvoiceStatus.DRAFT: {InvoiceStatus.PENDING, InvoiceStatus.SENT, InvoiceStatus.CANCELLED},
    InvoiceStatus.PENDING: {
        InvoiceStatus.SENT, InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED
    },
    InvoiceStatus.SENT: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED},
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED},
    InvoiceStatus.PAID: set(),
    InvoiceStatus.CANCELLED: set(),
}


def to_money(value) -> Decimal:
    """Round any numeric input half-up to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_totals(subtotal, tax_rate, discount) -> Tuple[Decimal, Decimal]:
    """
    Return (tax_amount, total) for an invoice.

    tax_rate is a percentage, so 15 means 15%. A discount larger than
    subtotal plus tax yields a negative total; callers decide what to do
    with it.
    """
    subtotal = Decimal(str(subtotal))
    tax_rate = Decimal(str(tax_rate))
    discount = Decimal(str(discount))

    tax_amount = to_money(subtotal * tax_rate / Decimal(100))
    total = to_money(subtotal + tax_amount - discount)
    return tax_amount, total


def can_transition(current: InvoiceStatus, new: InvoiceStatus) -> bool:
    return current == new or new in ALLOWED_TRANSITIONS[current]


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db

    def generate_invoice_number(self) -> str:
        timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        return f"INV-{timestamp}-{secrets.token_hex(3).upper()}"

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise NotFoundError("invoice_not_found")
        return invoice

    def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        client_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Invoice]:
        query = self.db.query(Invoice)
        if status:
            query = query.filter(Invoice.status == status)
        if client_id:
            query = query.filter(Invoice.client_id == client_id)
        return query.order_by(desc(Invoice.created_at), desc(Invoice.id)).offset(skip).limit(limit).all()

    def _apply_totals(self, invoice: Invoice) -> None:
        tax_amount, total = compute_totals(invoice.subtotal, invoice.tax_rate, invoice.discount)
        if total < 0:
            raise BadRequestError("negative_invoice_total")
        invoice.subtotal = to_money(invoice.subtotal)
        invoice.discount = to_money(invoice.discount)
        invoice.tax_amount = tax_amount
        invoice.total = total

    def _set_status(self, invoice: Invoice, new_status: InvoiceStatus) -> None:
        if not can_transition(invoice.status, new_status):
            raise BadRequestError("invalid_status_transition")
        invoice.status = new_status
        if new_status == InvoiceStatus.PAID and not invoice.paid_date:
            invoice.paid_date = datetime.utcnow()

    def create_invoice(self, invoice_data: InvoiceCreate, current_user: User) -> Invoice:
        if not self.db.query(Case).filter(Case.id == invoice_data.case_id).first():
            raise NotFoundError("case_not_found")
        if not self.db.query(Client).filter(Client.id == invoice_data.client_id).first():
            raise NotFoundError("client_not_found")

        data = invoice_data.dict()
        status = data.pop("status")
        if data["tax_rate"] is None:
            data["tax_rate"] = config.DEFAULT_TAX_RATE

        invoice = Invoice(
            **data,
            invoice_number=self.generate_invoice_number(),
            status=status,
            created_by=current_user.id
        )
        try:
            self._apply_totals(invoice)
            # Any status may be the starting point; transitions apply afterwards
            if status == InvoiceStatus.PAID and not invoice.paid_date:
                invoice.paid_date = datetime.utcnow()
            self.db.add(invoice)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(invoice)
        logger.info("Invoice %s created for client %s", invoice.invoice_number, invoice.client_id)
        return invoice

    def update_invoice(self, invoice_id: int, invoice_update: InvoiceUpdate) -> Invoice:
        """
        Partial update. Totals are recomputed only when an amount field is
        supplied; the new values are merged over the stored ones.
        """
        invoice = self.get_invoice(invoice_id)
        update_data = invoice_update.dict(exclude_unset=True)
        new_status = update_data.pop("status", None)
        # Amounts are never cleared, only replaced
        for field in AMOUNT_FIELDS:
            if field in update_data and update_data[field] is None:
                del update_data[field]

        try:
            for field, value in update_data.items():
                setattr(invoice, field, value)
            if any(field in update_data for field in AMOUNT_FIELDS):
                self._apply_totals(invoice)
            if new_status is not None:
                self._set_status(invoice, new_status)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(invoice)
        return invoice

    def set_status(self, invoice_id: int, new_status: InvoiceStatus) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        old_status = invoice.status
        self._set_status(invoice, new_status)
        self.db.commit()
        self.db.refresh(invoice)
        if old_status != new_status:
            logger.info("Invoice %s moved from %s to %s", invoice.invoice_number, old_status.value, new_status.value)
        return invoice

    def delete_invoice(self, invoice_id: int) -> None:
        invoice = self.get_invoice(invoice_id)
        invoice_number = invoice.invoice_number
        self.db.delete(invoice)
        self.db.commit()
        logger.info("Invoice %s deleted", invoice_number)

    def render_pdf(self, invoice_id: int) -> Tuple[Invoice, bytes]:
        invoice = self.get_invoice(invoice_id)
        case = self.db.query(Case).filter(Case.id == invoice.case_id).first()
        return invoice, render_invoice_pdf(invoice, case.case_number if case else None)
