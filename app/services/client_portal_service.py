"""
Client portal authentication and the client-scoped views behind it.

Clients never register themselves: staff issue a single-use invite token,
the client picks a password with it, and from then on logs in with email and
password to receive a portal token.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import func, desc

from app import config
from app.auth.utils import get_password_hash, verify_password, create_access_token
from app.auth.dependencies import CLIENT_SUBJECT_PREFIX
from app.errors import NotFoundError, BadRequestError, UnauthorizedError
from app.models import (
    Client, ClientPortalAuth, ClientMessage, SenderType, Case, CaseStatus,
    Invoice, InvoiceStatus, SharedDocument, User
)

logger = logging.getLogger(__name__)

DEFAULT_INVITE_DAYS = 7
RECENT_ITEMS = 5
PENDING_INVOICE_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.PENDING)


def invite_link(token: str) -> str:
    return f"{config.APP_URL.rstrip('/')}/client-portal/invite/{token}"


class ClientPortalService:
    def __init__(self, db: Session):
        self.db = db

    # =====================================================
    # AUTHENTICATION
    # =====================================================

    def _active_access_for_email(self, email: str, exclude_client_id: Optional[int] = None) -> List[ClientPortalAuth]:
        query = self.db.query(ClientPortalAuth).join(
            Client, ClientPortalAuth.client_id == Client.id
        ).filter(
            func.lower(Client.email) == email.lower(),
            ClientPortalAuth.is_active.is_(True)
        )
        if exclude_client_id is not None:
            query = query.filter(Client.id != exclude_client_id)
        return query.order_by(ClientPortalAuth.id).all()

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Check portal credentials and issue a portal token.

        Only clients with active access are candidates, so a second client
        record sharing the email cannot shadow the one that holds the
        login. Unknown email, inactive access and a wrong password all fail
        with the same error so the response does not reveal which one it was.
        """
        invalid = UnauthorizedError("invalid_credentials")

        candidates = self._active_access_for_email(email)
        if not candidates:
            logger.warning("Portal login failed: no active access for email")
            raise invalid

        auth = next((a for a in candidates if verify_password(password, a.password_hash)), None)
        if auth is None:
            logger.warning("Portal login failed: wrong password")
            raise invalid
        client = auth.client

        auth.last_login = datetime.utcnow()
        self.db.commit()

        access_token = create_access_token(
            data={"sub": f"{CLIENT_SUBJECT_PREFIX}{client.id}", "kind": "client"}
        )
        return {
            "success": True,
            "client": client,
            "access_token": access_token,
            "token_type": "bearer",
        }

    def create_invite(self, client_id: int, expiry_days: int = DEFAULT_INVITE_DAYS) -> Dict[str, Any]:
        client = self.db.query(Client).filter(Client.id == client_id).first()
        if not client:
            raise NotFoundError("client_not_found")

        auth = client.portal_auth
        if auth and auth.is_active:
            raise BadRequestError("portal_already_active")
        # Portal login is by email
        if not client.email:
            raise BadRequestError("client_email_missing")
        if self._active_access_for_email(client.email, exclude_client_id=client.id):
            raise BadRequestError("portal_email_in_use")

        invite_token = secrets.token_hex(32)
        invite_expiry = datetime.utcnow() + timedelta(days=expiry_days)

        if auth:
            auth.invite_token = invite_token
            auth.invite_expiry = invite_expiry
        else:
            # Unusable until the client sets a password through the invite
            placeholder = get_password_hash(secrets.token_hex(16))
            self.db.add(ClientPortalAuth(
                client_id=client.id,
                password_hash=placeholder,
                invite_token=invite_token,
                invite_expiry=invite_expiry,
                is_active=False
            ))
        self.db.commit()

        logger.info("Portal invite issued for client %s, valid %s days", client.id, expiry_days)
        return {
            "success": True,
            "invite_token": invite_token,
            "invite_link": invite_link(invite_token),
            "expires_at": invite_expiry,
        }

    def _auth_for_invite(self, token: str) -> ClientPortalAuth:
        auth = self.db.query(ClientPortalAuth).filter(ClientPortalAuth.invite_token == token).first()
        if not auth:
            raise NotFoundError("invalid_invite_token")
        if auth.invite_expiry and datetime.utcnow() > auth.invite_expiry:
            raise BadRequestError("invite_token_expired")
        return auth

    def verify_invite(self, token: str) -> Dict[str, Any]:
        auth = self._auth_for_invite(token)
        client = auth.client
        if not client:
            raise NotFoundError("client_not_found")
        return {"valid": True, "client_name": client.name, "client_email": client.email}

    def set_password(self, token: str, password: str) -> None:
        """Consume an invite token. The token cannot be used again afterwards."""
        auth = self._auth_for_invite(token)
        # Another client may have activated the same email since the invite went out
        email = auth.client.email if auth.client else None
        if email and self._active_access_for_email(email, exclude_client_id=auth.client_id):
            raise BadRequestError("portal_email_in_use")
        auth.password_hash = get_password_hash(password)
        auth.invite_token = None
        auth.invite_expiry = None
        auth.is_active = True
        self.db.commit()
        logger.info("Portal access activated for client %s", auth.client_id)

    def deactivate(self, client_id: int) -> None:
        auth = self.db.query(ClientPortalAuth).filter(ClientPortalAuth.client_id == client_id).first()
        if not auth:
            raise NotFoundError("portal_access_not_found")
        auth.is_active = False
        self.db.commit()
        logger.info("Portal access deactivated for client %s", client_id)

    # =====================================================
    # CLIENT SCOPED DATA
    # =====================================================

    def cases(self, client: Client) -> List[Case]:
        return self.db.query(Case).filter(Case.client_id == client.id).order_by(
            desc(Case.created_at), desc(Case.id)
        ).all()

    def invoices(self, client: Client) -> List[Invoice]:
        return self.db.query(Invoice).filter(Invoice.client_id == client.id).order_by(
            desc(Invoice.created_at), desc(Invoice.id)
        ).all()

    def shared_documents(self, client: Client) -> List[SharedDocument]:
        return self.db.query(SharedDocument).filter(SharedDocument.client_id == client.id).order_by(
            desc(SharedDocument.created_at), desc(SharedDocument.id)
        ).all()

    def unread_messages(self, client: Client) -> int:
        # Messages from the office the client has not opened yet
        return self.db.query(ClientMessage).filter(
            ClientMessage.client_id == client.id,
            ClientMessage.sender_type == SenderType.LAWYER,
            ClientMessage.is_read.is_(False)
        ).count()

    def dashboard(self, client: Client) -> Dict[str, Any]:
        cases = self.cases(client)
        invoices = self.invoices(client)
        shared_docs = self.shared_documents(client)

        return {
            "client": client,
            "stats": {
                "total_cases": len(cases),
                "active_cases": len([c for c in cases if c.status == CaseStatus.ACTIVE]),
                "total_invoices": len(invoices),
                "pending_invoices": len([i for i in invoices if i.status in PENDING_INVOICE_STATUSES]),
                "shared_documents": len(shared_docs),
                "unread_messages": self.unread_messages(client),
            },
            "recent_cases": cases[:RECENT_ITEMS],
            "recent_invoices": invoices[:RECENT_ITEMS],
            "recent_documents": shared_docs[:RECENT_ITEMS],
        }

    def messages(self, client: Client) -> List[ClientMessage]:
        return self.db.query(ClientMessage).filter(ClientMessage.client_id == client.id).order_by(
            ClientMessage.created_at, ClientMessage.id
        ).all()

    def send_client_message(self, client: Client, text: str) -> ClientMessage:
        message = ClientMessage(
            client_id=client.id,
            sender_id=client.id,
            sender_type=SenderType.CLIENT,
            message=text,
            is_read=False
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def send_staff_message(self, client_id: int, sender: User, text: str) -> ClientMessage:
        if not self.db.query(Client).filter(Client.id == client_id).first():
            raise NotFoundError("client_not_found")
        message = ClientMessage(
            client_id=client_id,
            sender_id=sender.id,
            sender_type=SenderType.LAWYER,
            message=text,
            is_read=False
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def mark_message_read(self, client: Client, message_id: int) -> ClientMessage:
        message = self.db.query(ClientMessage).filter(
            ClientMessage.id == message_id,
            ClientMessage.client_id == client.id
        ).first()
        if not message:
            raise NotFoundError("message_not_found")
        message.is_read = True
        self.db.commit()
        self.db.refresh(message)
        return message
