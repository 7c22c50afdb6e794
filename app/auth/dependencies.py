from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.database import get_db
from app.errors import UnauthorizedError, ForbiddenError
from app.models import User, UserRole, Client, ClientPortalAuth
from app.auth.utils import verify_token

bearer_scheme = HTTPBearer()

CLIENT_SUBJECT_PREFIX = "client:"

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
):
    credentials_exception = UnauthorizedError(
        "not_authenticated", headers={"WWW-Authenticate": "Bearer"}
    )
    token_data = verify_token(credentials.credentials, credentials_exception)
    # Portal tokens are not valid on staff endpoints
    if token_data.kind != "staff":
        raise credentials_exception
    user = db.query(User).filter(User.email == token_data.subject).first()
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise ForbiddenError("account_inactive")
    return user

def get_current_client(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
):
    """Resolve the client behind a portal token issued by /client-auth/login."""
    credentials_exception = UnauthorizedError(
        "not_authenticated", headers={"WWW-Authenticate": "Bearer"}
    )
    token_data = verify_token(credentials.credentials, credentials_exception)
    if token_data.kind != "client" or not token_data.subject.startswith(CLIENT_SUBJECT_PREFIX):
        raise credentials_exception
    try:
        client_id = int(token_data.subject[len(CLIENT_SUBJECT_PREFIX):])
    except ValueError:
        raise credentials_exception

    auth = db.query(ClientPortalAuth).filter(ClientPortalAuth.client_id == client_id).first()
    # Deactivated portal access revokes outstanding tokens
    if auth is None or not auth.is_active:
        raise credentials_exception
    client = db.query(Client).filter(Client.id == client_id).first()
    if client is None:
        raise credentials_exception
    return client

def require_role(allowed_roles: list[UserRole]):
    def role_checker(current_user: User = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise ForbiddenError("insufficient_permissions")
        return current_user
    return role_checker


# Convenience wrappers
def require_staff():
    return require_role([UserRole.USER, UserRole.LAWYER, UserRole.ADMIN])


def require_lawyer_or_admin():
    return require_role([UserRole.LAWYER, UserRole.ADMIN])
