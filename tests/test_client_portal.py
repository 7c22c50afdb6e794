from datetime import datetime, timedelta

from app.models import (
    Client, ClientType, ClientPortalAuth, ClientMessage, SenderType, Invoice, InvoiceStatus
)


def invite(client, auth_headers, sample_client, **overrides):
    payload = {"client_id": sample_client.id}
    payload.update(overrides)
    return client.post("/client-portal-admin/invite", json=payload, headers=auth_headers)


def activate(client, auth_headers, sample_client, password="portal-pass"):
    token = invite(client, auth_headers, sample_client).json()["invite_token"]
    response = client.post("/client-auth/set-password", json={"token": token, "password": password})
    assert response.status_code == 200
    return token


def portal_headers(client, email="omar@example.com", password="portal-pass"):
    response = client.post("/client-auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_create_invite(client, auth_headers, sample_client, db):
    response = invite(client, auth_headers, sample_client)

    assert response.status_code == 201
    data = response.json()
    assert len(data["invite_token"]) == 64
    assert data["invite_link"] == f"https://office.example.com/client-portal/invite/{data['invite_token']}"

    auth = db.query(ClientPortalAuth).filter(ClientPortalAuth.client_id == sample_client.id).one()
    assert auth.is_active is False
    assert auth.invite_expiry > datetime.utcnow() + timedelta(days=6)


def test_invite_unknown_client(client, auth_headers):
    response = client.post("/client-portal-admin/invite", json={"client_id": 42}, headers=auth_headers)
    assert response.status_code == 404


def test_reinvite_refreshes_pending_invite(client, auth_headers, sample_client, db):
    first = invite(client, auth_headers, sample_client).json()["invite_token"]
    second = invite(client, auth_headers, sample_client).json()["invite_token"]

    assert first != second
    assert client.get(f"/client-auth/verify-token?token={first}").status_code == 404
    assert db.query(ClientPortalAuth).count() == 1


def test_invite_refused_while_access_active(client, auth_headers, sample_client):
    activate(client, auth_headers, sample_client)

    response = invite(client, auth_headers, sample_client)

    assert response.status_code == 400
    assert response.json()["detail"] == "Client already has active portal access"


def test_verify_token(client, auth_headers, sample_client):
    token = invite(client, auth_headers, sample_client).json()["invite_token"]

    data = client.get(f"/client-auth/verify-token?token={token}").json()

    assert data == {"valid": True, "client_name": "Omar Al-Farsi", "client_email": "omar@example.com"}


def test_set_password_consumes_token(client, auth_headers, sample_client, db):
    token = activate(client, auth_headers, sample_client)

    db.expire_all()
    auth = db.query(ClientPortalAuth).filter(ClientPortalAuth.client_id == sample_client.id).one()
    assert auth.is_active is True
    assert auth.invite_token is None
    assert auth.invite_expiry is None

    again = client.post("/client-auth/set-password", json={"token": token, "password": "another-pass"})
    assert again.status_code == 404


def test_expired_invite_token(client, auth_headers, sample_client, db):
    token = invite(client, auth_headers, sample_client).json()["invite_token"]
    auth = db.query(ClientPortalAuth).filter(ClientPortalAuth.invite_token == token).one()
    auth.invite_expiry = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post("/client-auth/set-password", json={"token": token, "password": "portal-pass"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invitation token has expired"


def test_login_success(client, auth_headers, sample_client, db):
    activate(client, auth_headers, sample_client)

    response = client.post("/client-auth/login", json={"email": "omar@example.com", "password": "portal-pass"})

    assert response.status_code == 200
    data = response.json()
    assert data["client"] == {
        "id": sample_client.id, "name": "Omar Al-Farsi", "email": "omar@example.com", "type": "individual"
    }
    db.expire_all()
    assert db.query(ClientPortalAuth).one().last_login is not None


def test_login_failures_are_indistinguishable(client, auth_headers, sample_client):
    activate(client, auth_headers, sample_client)

    wrong_password = client.post("/client-auth/login", json={"email": "omar@example.com", "password": "nope"})
    unknown_email = client.post("/client-auth/login", json={"email": "nobody@example.com", "password": "nope"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_before_activation_fails_the_same_way(client, auth_headers, sample_client):
    invite(client, auth_headers, sample_client)

    pending = client.post("/client-auth/login", json={"email": "omar@example.com", "password": "whatever"})
    unknown = client.post("/client-auth/login", json={"email": "nobody@example.com", "password": "whatever"})

    assert pending.status_code == 401
    assert pending.json() == unknown.json()


def test_arabic_password_at_byte_limit_can_log_in(client, auth_headers, sample_client):
    password = "كلمة" * 9     # 36 letters, 72 bytes
    activate(client, auth_headers, sample_client, password=password)

    response = client.post("/client-auth/login", json={"email": "omar@example.com", "password": password})

    assert response.status_code == 200
    assert response.json()["client"]["id"] == sample_client.id


def test_set_password_over_byte_limit_is_rejected(client, auth_headers, sample_client, db):
    token = invite(client, auth_headers, sample_client).json()["invite_token"]

    response = client.post("/client-auth/set-password", json={"token": token, "password": "كلمة" * 10})

    assert response.status_code == 422
    db.expire_all()
    auth = db.query(ClientPortalAuth).one()
    assert auth.is_active is False
    assert auth.invite_token == token


def add_client_sharing_email(db, staff_user, email="OMAR@example.com"):
    record = Client(
        name="Omar Trading Est.", email=email, type=ClientType.COMPANY, created_by=staff_user.id
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def test_login_finds_the_client_holding_access_among_shared_emails(
    client, auth_headers, sample_client, staff_user, db
):
    invite(client, auth_headers, sample_client)
    company = add_client_sharing_email(db, staff_user)
    activate(client, auth_headers, company)

    response = client.post("/client-auth/login", json={"email": "omar@example.com", "password": "portal-pass"})

    assert response.status_code == 200
    assert response.json()["client"]["id"] == company.id


def test_invite_refused_when_email_already_has_active_access(
    client, auth_headers, sample_client, staff_user, db
):
    activate(client, auth_headers, sample_client)
    company = add_client_sharing_email(db, staff_user)

    response = invite(client, auth_headers, company)

    assert response.status_code == 400
    assert response.json()["detail"] == "Another client with this email already has active portal access"


def test_second_pending_invite_cannot_activate_shared_email(
    client, auth_headers, sample_client, staff_user, db
):
    company = add_client_sharing_email(db, staff_user)
    pending = invite(client, auth_headers, company).json()["invite_token"]
    activate(client, auth_headers, sample_client)

    response = client.post("/client-auth/set-password", json={"token": pending, "password": "other-pass"})

    assert response.status_code == 400
    assert client.post(
        "/client-auth/login", json={"email": "omar@example.com", "password": "portal-pass"}
    ).json()["client"]["id"] == sample_client.id


def test_deactivate_revokes_access(client, auth_headers, sample_client):
    activate(client, auth_headers, sample_client)
    headers = portal_headers(client)

    response = client.post(f"/client-portal-admin/{sample_client.id}/deactivate", headers=auth_headers)
    assert response.status_code == 200

    assert client.get("/client-auth/dashboard", headers=headers).status_code == 401
    login = client.post("/client-auth/login", json={"email": "omar@example.com", "password": "portal-pass"})
    assert login.status_code == 401


def test_portal_token_cannot_reach_staff_endpoints(client, auth_headers, sample_client):
    activate(client, auth_headers, sample_client)
    headers = portal_headers(client)

    assert client.get("/cases/", headers=headers).status_code == 401


def test_dashboard(client, auth_headers, sample_client, sample_case, db):
    activate(client, auth_headers, sample_client)
    headers = portal_headers(client)
    for status in (InvoiceStatus.SENT, InvoiceStatus.PAID):
        db.add(Invoice(
            invoice_number=f"INV-{status.value}", case_id=sample_case.id, client_id=sample_client.id,
            status=status, subtotal=100, tax_rate=15, tax_amount=15, discount=0, total=115,
            created_by=sample_case.created_by
        ))
    db.add(ClientMessage(
        client_id=sample_client.id, sender_id=sample_case.created_by,
        sender_type=SenderType.LAWYER, message="Hearing moved", is_read=False
    ))
    db.commit()

    data = client.get("/client-auth/dashboard", headers=headers).json()

    assert data["stats"] == {
        "total_cases": 1,
        "active_cases": 1,
        "total_invoices": 2,
        "pending_invoices": 1,
        "shared_documents": 0,
        "unread_messages": 1,
    }
    assert data["recent_cases"][0]["id"] == sample_case.id


def test_messages_are_scoped_to_client(client, auth_headers, sample_client, staff_user, db):
    activate(client, auth_headers, sample_client)
    headers = portal_headers(client)

    sent = client.post("/client-auth/messages", json={"message": "When is the hearing?"}, headers=headers)
    assert sent.status_code == 201
    assert sent.json()["sender_type"] == "client"

    reply = client.post(
        "/client-portal-admin/messages",
        json={"client_id": sample_client.id, "message": "Next Sunday"},
        headers=auth_headers
    ).json()
    assert reply["sender_type"] == "lawyer"
    assert reply["sender_id"] == staff_user.id

    messages = client.get("/client-auth/messages", headers=headers).json()
    assert [m["message"] for m in messages] == ["When is the hearing?", "Next Sunday"]

    read = client.put(f"/client-auth/messages/{reply['id']}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True

    assert client.put("/client-auth/messages/9999/read", headers=headers).status_code == 404
