import logging
from datetime import timedelta, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import BadRequestError, UnauthorizedError, ForbiddenError
from app.models import User, UserRole
from app.auth.schemas import UserCreate, Token, UserResponse
from app.auth.utils import verify_password, get_password_hash, create_access_token
from app.auth.dependencies import get_current_user
from app.config import ACCESS_TOKEN_EXPIRE_MINUTES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_data: UserCreate, db: Session = Depends(get_db)):
    if user_data.role == UserRole.CLIENT:
        # Clients reach the system through the portal invite flow
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Client accounts are created through portal invitations"
        )

    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise BadRequestError("email_already_registered")

    # The first account becomes the office administrator
    is_first_user = db.query(User).count() == 0
    db_user = User(
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        name=user_data.name,
        role=UserRole.ADMIN if is_first_user else user_data.role,
        phone=user_data.phone,
        is_active=True
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    logger.info("Registered staff user %s with role %s", db_user.id, db_user.role.value)
    return db_user

@router.post("/login", response_model=Token)
def login_user(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == form_data.username).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise UnauthorizedError("invalid_credentials", headers={"WWW-Authenticate": "Bearer"})

    if not user.is_active:
        raise ForbiddenError("account_inactive")

    # Update last login
    user.last_signed_in = datetime.utcnow()
    db.commit()

    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.email, "role": user.role.value, "kind": "staff"},
        expires_delta=access_token_expires
    )

    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user

@router.get("/lawyers", response_model=list[UserResponse])
def list_lawyers(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Users a case or task can be assigned to."""
    return db.query(User).filter(
        User.role.in_([UserRole.LAWYER, UserRole.ADMIN]),
        User.is_active.is_(True)
    ).order_by(User.name).all()
