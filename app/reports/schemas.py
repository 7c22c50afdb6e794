from pydantic import BaseModel
from decimal import Decimal

class DashboardReport(BaseModel):
    active_cases: int
    total_cases: int
    pending_tasks: int
    total_tasks: int
    unpaid_invoices: int
    unpaid_amount: Decimal
    total_revenue: Decimal
    paid_invoices: int

class CaseProfitability(BaseModel):
    case_id: int
    total_hours: Decimal
    total_revenue: Decimal
    total_expenses: Decimal
    profit: Decimal
    profit_margin: Decimal

class TeamProductivity(BaseModel):
    total_hours: Decimal
    billable_hours: Decimal
    non_billable_hours: Decimal
    completed_tasks: int
    billable_percentage: Decimal
