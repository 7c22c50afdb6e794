import pytest

from app.i18n import resolve_language
from app.models import CaseActivity, Notification, UserRole
from tests.conftest import make_user, auth_headers_for, STAFF_PASSWORD


# =====================================================
# AUTH
# =====================================================

def test_first_registered_user_becomes_admin(client, db):
    first = client.post(
        "/auth/register", json={"email": "first@example.com", "password": "secret1", "name": "First"}
    )
    second = client.post(
        "/auth/register", json={"email": "second@example.com", "password": "secret1", "name": "Second"}
    )

    assert first.json()["role"] == "admin"
    assert second.json()["role"] == "lawyer"


def test_register_duplicate_email(client, staff_user):
    response = client.post(
        "/auth/register", json={"email": staff_user.email, "password": "secret1", "name": "Dup"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


def test_register_password_over_byte_limit(client, db):
    response = client.post(
        "/auth/register", json={"email": "arabic@example.com", "password": "كلمة" * 10, "name": "Arabic"}
    )

    assert response.status_code == 422


def test_register_arabic_password_at_byte_limit_can_log_in(client):
    password = "كلمة" * 9
    client.post("/auth/register", json={"email": "arabic@example.com", "password": password, "name": "Arabic"})

    response = client.post("/auth/login", data={"username": "arabic@example.com", "password": password})

    assert response.status_code == 200


def test_login_and_me(client, staff_user):
    response = client.post("/auth/login", data={"username": staff_user.email, "password": STAFF_PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == staff_user.email


def test_login_wrong_password(client, staff_user):
    response = client.post("/auth/login", data={"username": staff_user.email, "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_invalid_token_rejected(client):
    response = client.get("/clients/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_client_role_cannot_use_staff_endpoints(client, db):
    outsider = make_user(db, email="outsider@example.com", role=UserRole.CLIENT)

    response = client.get("/clients/", headers=auth_headers_for(outsider))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_inactive_user_is_forbidden(client, db, staff_user):
    staff_user.is_active = False
    db.commit()

    response = client.get("/clients/", headers=auth_headers_for(staff_user))
    assert response.status_code == 403


# =====================================================
# CLIENTS
# =====================================================

def test_create_company_client(client, auth_headers):
    response = client.post(
        "/clients/",
        json={"name": "Nakheel Trading", "company_name": "Nakheel Trading LLC", "email": "info@nakheel.example"},
        headers=auth_headers
    )

    assert response.status_code == 201
    assert response.json()["type"] == "company"


def test_create_individual_client(client, auth_headers):
    response = client.post("/clients/", json={"name": "سارة المطيري"}, headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["type"] == "individual"
    assert data["status"] == "active"


def test_search_clients(client, auth_headers, sample_client):
    found = client.get("/clients/search?query=Farsi", headers=auth_headers).json()
    missing = client.get("/clients/search?query=nobody", headers=auth_headers).json()

    assert [c["id"] for c in found] == [sample_client.id]
    assert missing == []


def test_update_client(client, auth_headers, sample_client):
    response = client.put(f"/clients/{sample_client.id}", json={"phone": "0555555555"}, headers=auth_headers)

    assert response.json()["phone"] == "0555555555"
    assert response.json()["name"] == "Omar Al-Farsi"


@pytest.mark.parametrize("header,expected", [
    ("ar;q=0.1, en;q=0.9", "en"),
    ("en;q=0.2, ar", "ar"),
    ("ar-SA,ar;q=0.9", "ar"),
    ("fr-FR, ar;q=0.5, en;q=0.4", "ar"),
    ("en, ar", "en"),
    ("ar;q=0, en;q=0.1", "en"),
    ("fr, de;q=0.8", "en"),
    (None, "en"),
])
def test_resolve_language_follows_weights(header, expected):
    assert resolve_language(header) == expected


def test_low_weighted_arabic_is_not_preferred(client, auth_headers):
    response = client.get("/clients/999", headers={**auth_headers, "Accept-Language": "ar;q=0.1, en;q=0.9"})

    assert response.json()["detail"] == "Client not found"


def test_missing_client_localized(client, auth_headers):
    response = client.get("/clients/999", headers={**auth_headers, "Accept-Language": "ar-SA,ar;q=0.9"})

    assert response.status_code == 404
    assert response.json() == {"detail": "العميل غير موجود", "code": "NOT_FOUND"}


# =====================================================
# CASES
# =====================================================

def test_create_case_logs_activity_and_notifies_assignee(client, auth_headers, sample_client, db):
    colleague = make_user(db, email="colleague@example.com", name="Khalid")

    response = client.post(
        "/cases/",
        json={
            "title": "Employment claim",
            "case_type": "عمالي",
            "client_id": sample_client.id,
            "assigned_to": colleague.id,
        },
        headers=auth_headers
    )

    assert response.status_code == 201
    case = response.json()
    assert case["case_number"].startswith("CASE-")

    activities = db.query(CaseActivity).filter(CaseActivity.case_id == case["id"]).all()
    assert [a.activity_type for a in activities] == ["created"]
    notifications = db.query(Notification).filter(Notification.user_id == colleague.id).all()
    assert len(notifications) == 1
    assert notifications[0].related_id == case["id"]


def test_create_case_for_missing_client(client, auth_headers):
    response = client.post(
        "/cases/", json={"title": "X", "case_type": "مدني", "client_id": 999}, headers=auth_headers
    )
    assert response.status_code == 404


def test_duplicate_case_number(client, auth_headers, sample_case):
    response = client.post(
        "/cases/",
        json={
            "title": "Another",
            "case_type": "تجاري",
            "client_id": sample_case.client_id,
            "case_number": sample_case.case_number,
        },
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Case number already exists"


def test_status_change_is_logged(client, auth_headers, sample_case):
    response = client.put(f"/cases/{sample_case.id}", json={"status": "closed"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["closing_date"] is not None

    activities = client.get(f"/cases/{sample_case.id}/activities", headers=auth_headers).json()
    assert activities[0]["activity_type"] == "status_changed"
    assert activities[0]["activity_metadata"] == {"from": "active", "to": "closed"}


def test_list_cases_mine_filter(client, auth_headers, sample_case, db):
    colleague = make_user(db, email="colleague@example.com")
    client.post(
        "/cases/",
        json={"title": "Labour claim", "client_id": sample_case.client_id, "case_type": "عمالي"},
        headers=auth_headers_for(colleague)
    )

    everyone = client.get("/cases/", headers=auth_headers).json()
    mine = client.get("/cases/?mine=true", headers=auth_headers).json()

    assert len(everyone) == 2
    assert [c["case_number"] for c in mine] == ["CASE-TEST-0001"]
    assert len(client.get("/cases/?mine=true", headers=auth_headers_for(colleague)).json()) == 1


def test_get_case_includes_client(client, auth_headers, sample_case):
    data = client.get(f"/cases/{sample_case.id}", headers=auth_headers).json()

    assert data["client"]["name"] == "Omar Al-Farsi"


def test_case_stats(client, auth_headers, sample_case):
    stats = client.get("/cases/stats/overview", headers=auth_headers).json()

    assert stats["total_cases"] == 1
    assert stats["by_status"] == {"active": 1}
    assert stats["by_priority"] == {"medium": 1}
