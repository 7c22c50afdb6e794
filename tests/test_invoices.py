from decimal import Decimal

import pytest

from app.models import InvoiceStatus, UserRole
from app.services.invoice_service import compute_totals, can_transition, to_money
from tests.conftest import make_user, auth_headers_for


# =====================================================
# compute_totals
# =====================================================

def test_compute_totals_standard_vat():
    assert compute_totals(1000, 15, 0) == (Decimal("150.00"), Decimal("1150.00"))


def test_compute_totals_with_discount():
    assert compute_totals(500, 15, 50) == (Decimal("75.00"), Decimal("525.00"))


@pytest.mark.parametrize("subtotal,tax_rate,expected_tax", [
    ("0.10", "15", "0.02"),      # 0.015 rounds half up
    ("33.33", "15", "5.00"),     # 4.9995
    ("10.05", "5", "0.50"),      # 0.5025
    ("0", "15", "0.00"),
])
def test_compute_totals_rounds_half_up(subtotal, tax_rate, expected_tax):
    tax_amount, total = compute_totals(subtotal, tax_rate, 0)
    assert tax_amount == Decimal(expected_tax)
    assert total == to_money(Decimal(subtotal) + Decimal(expected_tax))


def test_compute_totals_does_not_clamp_negative_total():
    tax_amount, total = compute_totals(100, 15, 200)
    assert tax_amount == Decimal("15.00")
    assert total == Decimal("-85.00")


def test_status_transitions():
    assert can_transition(InvoiceStatus.DRAFT, InvoiceStatus.SENT)
    assert can_transition(InvoiceStatus.SENT, InvoiceStatus.PAID)
    assert can_transition(InvoiceStatus.OVERDUE, InvoiceStatus.PAID)
    assert can_transition(InvoiceStatus.PAID, InvoiceStatus.PAID)
    assert not can_transition(InvoiceStatus.PAID, InvoiceStatus.DRAFT)
    assert not can_transition(InvoiceStatus.CANCELLED, InvoiceStatus.SENT)
    assert not can_transition(InvoiceStatus.DRAFT, InvoiceStatus.PAID)


# =====================================================
# API
# =====================================================

def create_invoice(client, auth_headers, case, **overrides):
    payload = {"case_id": case.id, "client_id": case.client_id, "subtotal": "1000"}
    payload.update(overrides)
    return client.post("/invoices/", json=payload, headers=auth_headers)


def test_create_invoice_derives_tax_and_total(client, auth_headers, sample_case):
    response = create_invoice(client, auth_headers, sample_case)

    assert response.status_code == 201
    data = response.json()
    assert data["invoice_number"].startswith("INV-")
    assert data["status"] == "draft"
    assert Decimal(data["tax_rate"]) == Decimal("15.00")
    assert Decimal(data["tax_amount"]) == Decimal("150.00")
    assert Decimal(data["total"]) == Decimal("1150.00")


def test_create_invoice_ignores_client_supplied_totals(client, auth_headers, sample_case):
    response = create_invoice(
        client, auth_headers, sample_case, subtotal="500", discount="50", total="1", tax_amount="1"
    )

    assert response.status_code == 201
    assert Decimal(response.json()["total"]) == Decimal("525.00")


def test_create_invoice_rejects_negative_total(client, auth_headers, sample_case, db):
    response = create_invoice(client, auth_headers, sample_case, subtotal="100", discount="500")

    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"
    assert client.get("/invoices/", headers=auth_headers).json() == []


def test_create_invoice_unknown_case(client, auth_headers, sample_case):
    response = client.post(
        "/invoices/",
        json={"case_id": 999, "client_id": sample_case.client_id, "subtotal": "10"},
        headers=auth_headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Case not found"


def test_update_amount_recomputes_from_merged_values(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()

    response = client.put(f"/invoices/{invoice['id']}", json={"discount": "150"}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["subtotal"]) == Decimal("1000.00")
    assert Decimal(data["tax_amount"]) == Decimal("150.00")
    assert Decimal(data["total"]) == Decimal("1000.00")


def test_update_tax_rate_recomputes(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()

    data = client.put(f"/invoices/{invoice['id']}", json={"tax_rate": "5"}, headers=auth_headers).json()

    assert Decimal(data["tax_amount"]) == Decimal("50.00")
    assert Decimal(data["total"]) == Decimal("1050.00")


def test_update_notes_keeps_totals(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()

    data = client.put(f"/invoices/{invoice['id']}", json={"notes": "Retainer"}, headers=auth_headers).json()

    assert data["notes"] == "Retainer"
    assert Decimal(data["total"]) == Decimal("1150.00")


def test_update_rejected_when_total_would_go_negative(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()

    response = client.put(f"/invoices/{invoice['id']}", json={"discount": "5000"}, headers=auth_headers)
    assert response.status_code == 400

    stored = client.get(f"/invoices/{invoice['id']}", headers=auth_headers).json()
    assert Decimal(stored["discount"]) == Decimal("0.00")
    assert Decimal(stored["total"]) == Decimal("1150.00")


def test_paid_status_sets_paid_date(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()
    url = f"/invoices/{invoice['id']}/status"

    assert client.patch(url, json={"status": "sent"}, headers=auth_headers).status_code == 200
    data = client.patch(url, json={"status": "paid"}, headers=auth_headers).json()

    assert data["status"] == "paid"
    assert data["paid_date"] is not None


def test_illegal_transition_is_rejected(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case, status="cancelled").json()

    response = client.patch(
        f"/invoices/{invoice['id']}/status",
        json={"status": "sent"},
        headers={**auth_headers, "Accept-Language": "ar"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "لا يمكن نقل الفاتورة من حالتها الحالية إلى الحالة المطلوبة"


def test_list_filters_by_status(client, auth_headers, sample_case):
    create_invoice(client, auth_headers, sample_case)
    create_invoice(client, auth_headers, sample_case, status="sent")

    sent = client.get("/invoices/?status=sent", headers=auth_headers).json()

    assert len(sent) == 1
    assert sent[0]["status"] == "sent"


def test_pdf_link_serves_printable_invoice(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case, discount="0", notes="Retainer for appeal").json()

    link = client.post(f"/invoices/{invoice['id']}/pdf", headers=auth_headers).json()
    assert link == {"success": True, "pdf_url": f"/invoices/{invoice['id']}/pdf"}

    response = client.get(link["pdf_url"], headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert invoice["invoice_number"] in response.headers["content-disposition"]
    body = response.content
    assert body.startswith(b"%PDF")
    assert invoice["invoice_number"].encode() in body
    assert b"Omar Al-Farsi" in body
    assert b"CASE-TEST-0001" in body
    assert b"Retainer for appeal" in body
    for figure in (b"1000.00", b"150.00", b"1150.00"):
        assert figure in body


def test_pdf_for_missing_invoice(client, auth_headers):
    assert client.get("/invoices/999/pdf", headers=auth_headers).status_code == 404
    assert client.post("/invoices/999/pdf", headers=auth_headers).status_code == 404


def test_pdf_needs_auth(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()

    assert client.get(f"/invoices/{invoice['id']}/pdf").status_code in (401, 403)


def test_delete_invoice(client, auth_headers, sample_case):
    invoice = create_invoice(client, auth_headers, sample_case).json()

    assert client.delete(f"/invoices/{invoice['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/invoices/{invoice['id']}", headers=auth_headers).status_code == 404


def test_plain_staff_user_cannot_delete_invoice(client, auth_headers, sample_case, db):
    invoice = create_invoice(client, auth_headers, sample_case).json()
    assistant = make_user(db, email="assistant@example.com", role=UserRole.USER)

    response = client.delete(f"/invoices/{invoice['id']}", headers=auth_headers_for(assistant))

    assert response.status_code == 403
