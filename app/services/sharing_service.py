"""
Secure document sharing.

A share is a random URL-safe token granting one client a permission level on
one document. Links may carry a bcrypt-hashed password and an expiry. Every
successful use is counted and written to the document access log.
"""
import logging
import secrets
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy import desc

from app import config
from app.auth.utils import get_password_hash, verify_password
from app.errors import NotFoundError, ForbiddenError, UnauthorizedError
from app.models import (
    Client, Document, SharedDocument, DocumentAccessLog, SharePermission, AccessAction, User
)

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
DOWNLOAD_PERMISSIONS = (SharePermission.DOWNLOAD, SharePermission.EDIT)


def generate_share_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def share_url(token: str) -> str:
    return f"{config.APP_URL.rstrip('/')}/shared/{token}"


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SharingService:
    def __init__(self, db: Session):
        self.db = db

    def _log_access(
        self,
        document_id: int,
        action: AccessAction,
        user_id: Optional[int] = None,
        client_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> None:
        self.db.add(DocumentAccessLog(
            document_id=document_id,
            user_id=user_id,
            client_id=client_id,
            action=action,
            ip_address=ip_address,
            user_agent=user_agent
        ))

    def create_share(
        self,
        document_id: int,
        client_id: int,
        current_user: User,
        permissions: SharePermission = SharePermission.VIEW,
        password: Optional[str] = None,
        expires_at: Optional[datetime] = None
    ) -> Tuple[SharedDocument, str]:
        """Issue a new link and return it together with its public URL."""
        document = self.db.query(Document).filter(
            Document.id == document_id,
            Document.is_deleted.is_(False)
        ).first()
        if not document:
            raise NotFoundError("document_not_found")
        if not self.db.query(Client).filter(Client.id == client_id).first():
            raise NotFoundError("client_not_found")

        share = SharedDocument(
            document_id=document_id,
            client_id=client_id,
            share_token=generate_share_token(),
            password_hash=get_password_hash(password) if password else None,
            permissions=permissions,
            expires_at=as_naive_utc(expires_at),
            access_count=0,
            created_by=current_user.id
        )
        self.db.add(share)
        self._log_access(document_id, AccessAction.SHARE, user_id=current_user.id, client_id=client_id)
        self.db.commit()
        self.db.refresh(share)

        logger.info(
            "Document %s shared with client %s (permissions=%s, password=%s, expires=%s)",
            document_id, client_id, permissions.value, bool(password), share.expires_at
        )
        return share, share_url(share.share_token)

    def resolve_share(
        self,
        token: str,
        password: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        action: AccessAction = AccessAction.VIEW
    ) -> SharedDocument:
        """
        Validate a link and record the access.

        Expiry is checked before the password, so an expired link is
        Forbidden whatever password is supplied.
        """
        share = self.db.query(SharedDocument).filter(SharedDocument.share_token == token).first()
        if not share:
            raise NotFoundError("shared_document_not_found")

        if share.expires_at is not None and share.expires_at <= datetime.utcnow():
            logger.warning("Expired share link used for document %s", share.document_id)
            raise ForbiddenError("share_expired")

        if share.password_hash:
            if not password:
                raise UnauthorizedError("share_password_required")
            if not verify_password(password, share.password_hash):
                logger.warning("Wrong password on share link for document %s", share.document_id)
                raise UnauthorizedError("share_password_invalid")

        if action == AccessAction.DOWNLOAD and share.permissions not in DOWNLOAD_PERMISSIONS:
            raise ForbiddenError("share_permission_denied")

        document = self.db.query(Document).filter(
            Document.id == share.document_id,
            Document.is_deleted.is_(False)
        ).first()
        if not document:
            raise NotFoundError("document_not_found")

        share.access_count = (share.access_count or 0) + 1
        share.last_accessed_at = datetime.utcnow()
        self._log_access(
            share.document_id, action,
            client_id=share.client_id, ip_address=ip_address, user_agent=user_agent
        )
        self.db.commit()
        self.db.refresh(share)
        return share

    def list_shares(self, document_id: int) -> List[SharedDocument]:
        return self.db.query(SharedDocument).filter(
            SharedDocument.document_id == document_id
        ).order_by(desc(SharedDocument.created_at), desc(SharedDocument.id)).all()

    def revoke_share(self, share_id: int) -> None:
        share = self.db.query(SharedDocument).filter(SharedDocument.id == share_id).first()
        if not share:
            raise NotFoundError("shared_document_not_found")
        document_id = share.document_id
        self.db.delete(share)
        self.db.commit()
        logger.info("Share %s on document %s revoked", share_id, document_id)

    def access_logs(self, document_id: int) -> List[DocumentAccessLog]:
        return self.db.query(DocumentAccessLog).filter(
            DocumentAccessLog.document_id == document_id
        ).order_by(desc(DocumentAccessLog.created_at), desc(DocumentAccessLog.id)).all()
