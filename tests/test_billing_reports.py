import base64
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.errors import BadRequestError
from app.expenses.routes import decode_receipt
from app.models import Case, Invoice, InvoiceStatus, Task, TaskStatus
from app.time_entries.routes import billed_amount
from tests.conftest import make_user, auth_headers_for


# =====================================================
# TIME ENTRIES
# =====================================================

def test_billed_amount():
    assert billed_amount(Decimal("1.5"), Decimal("333.33")) == Decimal("500.00")
    assert billed_amount(Decimal("2"), None) is None


def log_time(client, auth_headers, case, hours="2.5", rate="400", **extra):
    payload = {
        "case_id": case.id,
        "description": "Drafted statement of claim",
        "hours": hours,
        "rate": rate,
        "date": "2024-05-01T09:00:00",
    }
    payload.update(extra)
    return client.post("/time-entries/", json=payload, headers=auth_headers)


def test_time_entry_amount_is_derived(client, auth_headers, sample_case):
    response = log_time(client, auth_headers, sample_case)

    assert response.status_code == 201
    assert Decimal(response.json()["amount"]) == Decimal("1000.00")


def test_time_entry_update_recomputes_amount(client, auth_headers, sample_case):
    entry = log_time(client, auth_headers, sample_case).json()

    data = client.put(f"/time-entries/{entry['id']}", json={"hours": "1"}, headers=auth_headers).json()
    assert Decimal(data["amount"]) == Decimal("400.00")

    data = client.put(f"/time-entries/{entry['id']}", json={"hours": None}, headers=auth_headers).json()
    assert Decimal(data["hours"]) == Decimal("1.00")


def test_time_entry_without_rate(client, auth_headers, sample_case):
    response = log_time(client, auth_headers, sample_case, rate=None)
    assert response.json()["amount"] is None


def test_my_time_entries_date_window(client, auth_headers, sample_case):
    log_time(client, auth_headers, sample_case, date="2024-05-01T09:00:00")
    log_time(client, auth_headers, sample_case, date="2024-06-01T09:00:00")

    may = client.get(
        "/time-entries/mine?start_date=2024-05-01T00:00:00&end_date=2024-05-31T23:59:59",
        headers=auth_headers
    ).json()
    assert len(may) == 1

    reversed_window = client.get(
        "/time-entries/mine?start_date=2024-06-01T00:00:00&end_date=2024-05-01T00:00:00",
        headers=auth_headers
    )
    assert reversed_window.status_code == 400


# =====================================================
# EXPENSES
# =====================================================

def test_decode_receipt_accepts_data_url():
    encoded = base64.b64encode(b"receipt bytes").decode()
    assert decode_receipt(f"data:image/png;base64,{encoded}") == b"receipt bytes"
    assert decode_receipt(encoded) == b"receipt bytes"


@pytest.mark.parametrize("bad", ["not base64!!", ""])
def test_decode_receipt_rejects_garbage(bad):
    with pytest.raises(BadRequestError):
        decode_receipt(bad)


def test_expense_with_receipt(client, auth_headers, sample_case, storage):
    response = client.post(
        "/expenses/",
        json={
            "case_id": sample_case.id,
            "description": "Court filing fee",
            "amount": "250.00",
            "date": "2024-05-02T10:00:00",
            "receipt_data": base64.b64encode(b"fee receipt").decode(),
            "receipt_file_name": "fee.pdf",
        },
        headers=auth_headers
    )

    assert response.status_code == 201
    receipt_url = response.json()["receipt_url"]
    assert receipt_url.startswith("/files/receipts/")
    key = receipt_url[len("/files/"):]
    assert storage.path_for(key).read_bytes() == b"fee receipt"


def test_expense_with_invalid_receipt(client, auth_headers, sample_case):
    response = client.post(
        "/expenses/",
        json={
            "case_id": sample_case.id,
            "description": "Courier",
            "amount": "40",
            "date": "2024-05-02T10:00:00",
            "receipt_data": "%%%",
        },
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Receipt data is not valid base64"
    assert client.get(f"/expenses/case/{sample_case.id}", headers=auth_headers).json() == []


# =====================================================
# REPORTS
# =====================================================

def add_invoice(db, case, status, total):
    db.add(Invoice(
        invoice_number=f"INV-{status.value}-{total}",
        case_id=case.id,
        client_id=case.client_id,
        status=status,
        subtotal=total,
        tax_rate=0,
        tax_amount=0,
        discount=0,
        total=total,
        created_by=case.created_by
    ))
    db.commit()


def test_dashboard(client, auth_headers, sample_case, staff_user, db):
    add_invoice(db, sample_case, InvoiceStatus.SENT, Decimal("100.00"))
    add_invoice(db, sample_case, InvoiceStatus.OVERDUE, Decimal("50.50"))
    add_invoice(db, sample_case, InvoiceStatus.PAID, Decimal("1000.00"))
    add_invoice(db, sample_case, InvoiceStatus.DRAFT, Decimal("999.00"))
    db.add(Task(
        case_id=sample_case.id, title="Prepare hearing notes",
        assigned_to=staff_user.id, created_by=staff_user.id, status=TaskStatus.PENDING
    ))
    db.commit()

    data = client.get("/reports/dashboard", headers=auth_headers).json()

    assert data["active_cases"] == data["total_cases"] == 1
    assert data["pending_tasks"] == data["total_tasks"] == 1
    assert data["unpaid_invoices"] == 2
    assert Decimal(data["unpaid_amount"]) == Decimal("150.50")
    assert Decimal(data["total_revenue"]) == Decimal("1000.00")
    assert data["paid_invoices"] == 1


def add_colleague_case(db, sample_case):
    colleague = make_user(db, email="colleague@example.com")
    case = Case(
        case_number="CASE-TEST-0002",
        title="Labour claim",
        client_id=sample_case.client_id,
        case_type="عمالي",
        assigned_to=colleague.id,
        created_by=colleague.id
    )
    db.add(case)
    db.commit()
    db.refresh(case)
    return colleague, case


def test_dashboard_mine_counts_only_callers_cases(client, auth_headers, sample_case, db):
    colleague, other_case = add_colleague_case(db, sample_case)
    add_invoice(db, sample_case, InvoiceStatus.SENT, Decimal("100.00"))
    add_invoice(db, other_case, InvoiceStatus.PAID, Decimal("700.00"))

    office = client.get("/reports/dashboard", headers=auth_headers).json()
    mine = client.get("/reports/dashboard?mine=true", headers=auth_headers).json()
    theirs = client.get("/reports/dashboard?mine=true", headers=auth_headers_for(colleague)).json()

    assert office["total_cases"] == 2
    assert Decimal(office["total_revenue"]) == Decimal("700.00")
    assert mine["total_cases"] == 1
    assert mine["unpaid_invoices"] == 1
    assert Decimal(mine["total_revenue"]) == Decimal("0.00")
    assert theirs["total_cases"] == 1
    assert theirs["unpaid_invoices"] == 0
    assert Decimal(theirs["total_revenue"]) == Decimal("700.00")


def test_case_profitability(client, auth_headers, sample_case):
    log_time(client, auth_headers, sample_case, hours="2", rate="500")
    client.post(
        "/expenses/",
        json={"case_id": sample_case.id, "description": "Travel", "amount": "250", "date": "2024-05-02T10:00:00"},
        headers=auth_headers
    )

    data = client.get(f"/reports/case-profitability/{sample_case.id}", headers=auth_headers).json()

    assert Decimal(data["total_hours"]) == Decimal("2.00")
    assert Decimal(data["total_revenue"]) == Decimal("1000.00")
    assert Decimal(data["total_expenses"]) == Decimal("250.00")
    assert Decimal(data["profit"]) == Decimal("750.00")
    assert Decimal(data["profit_margin"]) == Decimal("75.00")


def test_case_profitability_without_activity(client, auth_headers, sample_case):
    data = client.get(f"/reports/case-profitability/{sample_case.id}", headers=auth_headers).json()

    assert Decimal(data["profit_margin"]) == Decimal("0")


def test_case_profitability_missing_case(client, auth_headers):
    assert client.get("/reports/case-profitability/999", headers=auth_headers).status_code == 404


def test_team_productivity(client, auth_headers, sample_case, staff_user, db):
    log_time(client, auth_headers, sample_case, hours="3")
    log_time(client, auth_headers, sample_case, hours="1", is_billable=False)
    db.add(Task(
        case_id=sample_case.id, title="File appeal", assigned_to=staff_user.id, created_by=staff_user.id,
        status=TaskStatus.COMPLETED, completed_at=datetime(2024, 5, 3, 12, 0)
    ))
    db.commit()

    data = client.get(
        "/reports/team-productivity?start_date=2024-05-01T00:00:00&end_date=2024-05-31T23:59:59",
        headers=auth_headers
    ).json()

    assert Decimal(data["total_hours"]) == Decimal("4.00")
    assert Decimal(data["billable_hours"]) == Decimal("3.00")
    assert Decimal(data["non_billable_hours"]) == Decimal("1.00")
    assert data["completed_tasks"] == 1
    assert Decimal(data["billable_percentage"]) == Decimal("75.00")


def test_team_productivity_rejects_reversed_range(client, auth_headers):
    start = datetime(2024, 6, 1)
    end = start - timedelta(days=1)

    response = client.get(
        f"/reports/team-productivity?start_date={start.isoformat()}&end_date={end.isoformat()}",
        headers=auth_headers
    )

    assert response.status_code == 400
