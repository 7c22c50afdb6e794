from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import or_, desc
from typing import List, Optional

from app.database import get_db
from app.errors import NotFoundError
from app.models import User, Client, ClientType
from app.clients.schemas import ClientCreate, ClientUpdate, ClientResponse
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_or_404(db: Session, client_id: int) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise NotFoundError("client_not_found")
    return client

@router.get("/", response_model=List[ClientResponse])
def list_clients(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    status: Optional[str] = None,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """List clients, newest first."""
    query = db.query(Client)
    if status:
        query = query.filter(Client.status == status)
    return query.order_by(desc(Client.created_at), desc(Client.id)).offset(skip).limit(limit).all()

@router.get("/search", response_model=List[ClientResponse])
def search_clients(
    query: str = Query(..., min_length=1),
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Search clients by name, email, phone or company name."""
    pattern = f"%{query}%"
    return db.query(Client).filter(
        or_(
            Client.name.ilike(pattern),
            Client.email.ilike(pattern),
            Client.phone.ilike(pattern),
            Client.company_name.ilike(pattern)
        )
    ).order_by(desc(Client.created_at), desc(Client.id)).all()

@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return get_client_or_404(db, client_id)

@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Create a client. Providing a company name makes it a company client."""
    client = Client(
        **client_data.dict(),
        type=ClientType.COMPANY if client_data.company_name else ClientType.INDIVIDUAL,
        created_by=current_user.id
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return client

@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    client_update: ClientUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    client = get_client_or_404(db, client_id)

    update_data = client_update.dict(exclude_unset=True)
    for field, value in update_data.items():
        setattr(client, field, value)

    db.commit()
    db.refresh(client)
    return client
