from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.database import get_db
from app.errors import NotFoundError
from app.models import User, LegalTemplate
from app.templates.schemas import (
    TemplateCreate, TemplateUpdate, TemplateResponse, TemplateRenderRequest, TemplateRenderResponse
)
from app.services.template_service import render_template, find_placeholders
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/templates", tags=["Legal Templates"])


def get_template_or_404(db: Session, template_id: int) -> LegalTemplate:
    template = db.query(LegalTemplate).filter(LegalTemplate.id == template_id).first()
    if not template:
        raise NotFoundError("template_not_found")
    return template

@router.get("/", response_model=List[TemplateResponse])
def list_templates(
    category: Optional[str] = None,
    include_inactive: bool = False,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    query = db.query(LegalTemplate)
    if not include_inactive:
        query = query.filter(LegalTemplate.is_active.is_(True))
    if category:
        query = query.filter(LegalTemplate.category == category)
    return query.order_by(desc(LegalTemplate.created_at), desc(LegalTemplate.id)).all()

@router.get("/{template_id}", response_model=TemplateResponse)
def get_template(
    template_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return get_template_or_404(db, template_id)

@router.post("/", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    template_data: TemplateCreate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    template = LegalTemplate(**template_data.dict(), is_active=True, created_by=current_user.id)
    db.add(template)
    db.commit()
    db.refresh(template)
    return template

@router.put("/{template_id}", response_model=TemplateResponse)
def update_template(
    template_id: int,
    template_update: TemplateUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    template = get_template_or_404(db, template_id)

    update_data = template_update.dict(exclude_unset=True)
    for field, value in update_data.items():
        setattr(template, field, value)

    db.commit()
    db.refresh(template)
    return template

@router.delete("/{template_id}")
def delete_template(
    template_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    template = get_template_or_404(db, template_id)
    db.delete(template)
    db.commit()
    return {"success": True}

@router.post("/{template_id}/render", response_model=TemplateRenderResponse)
def render(
    template_id: int,
    request: TemplateRenderRequest,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    """Fill the template's {{name}} placeholders with the given values."""
    template = get_template_or_404(db, template_id)
    content = render_template(template.template_content, request.variables)
    return TemplateRenderResponse(content=content, missing_variables=find_placeholders(content))
