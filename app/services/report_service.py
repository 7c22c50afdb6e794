from datetime import datetime
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session
from sqlalchemy import func, select

from app.errors import NotFoundError
from app.models import (
    Case, CaseStatus, Task, TaskStatus, Invoice, InvoiceStatus, TimeEntry, Expense, User
)
from app.services.invoice_service import to_money
from app.services.case_service import handled_by

ZERO = Decimal("0")
UNPAID_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


def _sum(query) -> Decimal:
    value = query.scalar()
    return to_money(value if value is not None else ZERO)


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return to_money(ZERO)
    return to_money(part / whole * 100)


class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def dashboard(self, current_user: User, mine: bool = False) -> Dict[str, Any]:
        """
        Case and billing figures plus the caller's task load.

        Figures are office wide unless ``mine`` is set, in which case only
        cases the caller opened or is assigned to, and the invoices raised
        on them, are counted.
        """
        cases = self.db.query(Case)
        invoices = self.db.query(Invoice)
        if mine:
            cases = cases.filter(handled_by(current_user))
            own_case_ids = select(Case.id).where(handled_by(current_user))
            invoices = invoices.filter(Invoice.case_id.in_(own_case_ids))

        my_tasks = self.db.query(Task).filter(Task.assigned_to == current_user.id)
        pending_tasks = my_tasks.filter(
            Task.status.in_([TaskStatus.PENDING, TaskStatus.IN_PROGRESS])
        ).count()

        unpaid = invoices.filter(Invoice.status.in_(UNPAID_STATUSES))
        paid = invoices.filter(Invoice.status == InvoiceStatus.PAID)

        return {
            "active_cases": cases.filter(Case.status == CaseStatus.ACTIVE).count(),
            "total_cases": cases.count(),
            "pending_tasks": pending_tasks,
            "total_tasks": my_tasks.count(),
            "unpaid_invoices": unpaid.count(),
            "unpaid_amount": _sum(unpaid.with_entities(func.sum(Invoice.total))),
            "total_revenue": _sum(paid.with_entities(func.sum(Invoice.total))),
            "paid_invoices": paid.count(),
        }

    def case_profitability(self, case_id: int) -> Dict[str, Any]:
        """Billed time against expenses for one case."""
        if not self.db.query(Case).filter(Case.id == case_id).first():
            raise NotFoundError("case_not_found")

        total_hours = _sum(self.db.query(func.sum(TimeEntry.hours)).filter(TimeEntry.case_id == case_id))
        total_revenue = _sum(self.db.query(func.sum(TimeEntry.amount)).filter(TimeEntry.case_id == case_id))
        total_expenses = _sum(self.db.query(func.sum(Expense.amount)).filter(Expense.case_id == case_id))
        profit = total_revenue - total_expenses

        return {
            "case_id": case_id,
            "total_hours": total_hours,
            "total_revenue": total_revenue,
            "total_expenses": total_expenses,
            "profit": profit,
            "profit_margin": _percentage(profit, total_revenue),
        }

    def team_productivity(self, current_user: User, start_date: datetime, end_date: datetime) -> Dict[str, Any]:
        entries = self.db.query(TimeEntry).filter(
            TimeEntry.user_id == current_user.id,
            TimeEntry.date >= start_date,
            TimeEntry.date <= end_date
        )
        total_hours = _sum(entries.with_entities(func.sum(TimeEntry.hours)))
        billable_hours = _sum(
            entries.filter(TimeEntry.is_billable.is_(True)).with_entities(func.sum(TimeEntry.hours))
        )

        completed_tasks = self.db.query(Task).filter(
            Task.assigned_to == current_user.id,
            Task.status == TaskStatus.COMPLETED,
            Task.completed_at >= start_date,
            Task.completed_at <= end_date
        ).count()

        return {
            "total_hours": total_hours,
            "billable_hours": billable_hours,
            "non_billable_hours": total_hours - billable_hours,
            "completed_tasks": completed_tasks,
            "billable_percentage": _percentage(billable_hours, total_hours),
        }
