"""
Printable invoice rendering.

Draws the invoice header, the parties and the amount breakdown onto a single
A4 page with reportlab. The built-in Helvetica face covers Latin text only;
set INVOICE_PDF_FONT to a TrueType file to print Arabic names.
"""
import logging
from io import BytesIO
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from app import config
from app.models import Invoice

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
CUSTOM_FONT = "InvoiceFont"


def _font_name() -> str:
    if not config.INVOICE_PDF_FONT:
        return DEFAULT_FONT
    if CUSTOM_FONT not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(CUSTOM_FONT, config.INVOICE_PDF_FONT))
    return CUSTOM_FONT


def _fmt(value) -> str:
    return f"{value:.2f}" if value is not None else "0.00"


def invoice_lines(invoice: Invoice, case_number: Optional[str] = None) -> List[Tuple[str, str]]:
    """Label/value pairs printed on the invoice, top to bottom."""
    client = invoice.client
    lines = [
        ("Invoice", invoice.invoice_number),
        ("Status", invoice.status.value),
        ("Client", client.name if client else ""),
    ]
    if case_number:
        lines.append(("Case", case_number))
    if invoice.due_date:
        lines.append(("Due date", invoice.due_date.strftime("%Y-%m-%d")))
    lines += [
        ("Subtotal", _fmt(invoice.subtotal)),
        ("Discount", _fmt(invoice.discount)),
        (f"VAT ({_fmt(invoice.tax_rate)}%)", _fmt(invoice.tax_amount)),
        ("Total", _fmt(invoice.total)),
    ]
    return lines


def render_invoice_pdf(invoice: Invoice, case_number: Optional[str] = None) -> bytes:
    font = _font_name()
    buf = BytesIO()
    # Uncompressed so the figures stay searchable in the raw file
    c = canvas.Canvas(buf, pagesize=A4, pageCompression=0)
    c.setTitle(invoice.invoice_number)

    width, height = A4
    y = height - 60
    c.setFont(font, 18)
    c.drawString(50, y, "INVOICE")
    y -= 40

    for label, value in invoice_lines(invoice, case_number):
        size = 13 if label == "Total" else 11
        c.setFont(font, size)
        c.drawString(50, y, label)
        c.drawRightString(width - 50, y, value)
        y -= size + 10

    if invoice.notes:
        c.setFont(font, 10)
        y -= 10
        for line in invoice.notes.splitlines():
            if y < 60:
                c.showPage()
                c.setFont(font, 10)
                y = height - 60
            c.drawString(50, y, line)
            y -= 14

    c.showPage()
    c.save()
    logger.info("Rendered invoice %s as PDF", invoice.invoice_number)
    return buf.getvalue()
