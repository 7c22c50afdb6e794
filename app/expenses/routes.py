import base64
import binascii
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.database import get_db
from app.errors import NotFoundError, BadRequestError
from app.models import User, Case, Expense
from app.expenses.schemas import ExpenseCreate, ExpenseUpdate, ExpenseResponse
from app.documents.storage import LocalFileStorage, get_storage, MAX_FILE_SIZE
from app.auth.dependencies import require_staff

router = APIRouter(prefix="/expenses", tags=["Expenses"])


def get_expense_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("expense_not_found")
    return expense

def decode_receipt(data: str) -> bytes:
    # Accept data URLs ("data:image/png;base64,....") as well as bare base64
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        content = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise BadRequestError("invalid_receipt")
    if not content:
        raise BadRequestError("invalid_receipt")
    if len(content) > MAX_FILE_SIZE:
        raise BadRequestError("file_too_large")
    return content

@router.get("/case/{case_id}", response_model=List[ExpenseResponse])
def get_expenses_by_case(
    case_id: int,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    return db.query(Expense).filter(Expense.case_id == case_id).order_by(
        desc(Expense.date), desc(Expense.id)
    ).all()

@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(require_staff()),
    storage: LocalFileStorage = Depends(get_storage),
    db: Session = Depends(get_db)
):
    """Record an expense, storing the receipt when one is attached."""
    if not db.query(Case).filter(Case.id == expense_data.case_id).first():
        raise NotFoundError("case_not_found")

    receipt_url = None
    if expense_data.receipt_data:
        content = decode_receipt(expense_data.receipt_data)
        file_key = storage.build_key(
            "receipts", current_user.id, expense_data.receipt_file_name or "receipt"
        )
        receipt_url = storage.put(file_key, content)

    expense = Expense(
        **expense_data.dict(exclude={"receipt_data", "receipt_file_name"}),
        user_id=current_user.id,
        receipt_url=receipt_url
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense

@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: int,
    expense_update: ExpenseUpdate,
    current_user: User = Depends(require_staff()),
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)

    update_data = expense_update.dict(exclude_unset=True)
    for field, value in update_data.items():
        setattr(expense, field, value)

    db.commit()
    db.refresh(expense)
    return expense
