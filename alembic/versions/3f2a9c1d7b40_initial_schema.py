"""Initial law office schema

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-17 09:12:44.218300

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

priority_level = ("low", "medium", "high", "urgent")


def timestamps(with_updated=True):
    columns = [sa.Column("created_at", sa.DateTime(), server_default=sa.func.now())]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()))
    return columns


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("user", "admin", "lawyer", "client", name="userrole"), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("avatar", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_signed_in", sa.DateTime()),
        *timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(320)),
        sa.Column("phone", sa.String(20)),
        sa.Column("address", sa.Text()),
        sa.Column("national_id", sa.String(20)),
        sa.Column("company_name", sa.Text()),
        sa.Column("company_registration", sa.String(50)),
        sa.Column("type", sa.Enum("individual", "company", name="clienttype"), nullable=False),
        sa.Column("status", sa.Enum("active", "inactive", name="clientstatus"), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_clients_email", "clients", ["email"])
    op.create_index("ix_clients_phone", "clients", ["phone"])

    op.create_table(
        "client_portal_auth",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("invite_token", sa.String(128)),
        sa.Column("invite_expiry", sa.DateTime()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime()),
        *timestamps(),
    )
    op.create_index("ix_client_portal_auth_invite_token", "client_portal_auth", ["invite_token"], unique=True)

    op.create_table(
        "client_messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("sender_type", sa.Enum("client", "lawyer", name="sendertype"), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        *timestamps(with_updated=False),
    )
    op.create_index("ix_client_messages_client_id", "client_messages", ["client_id"])
    op.create_index("ix_client_messages_created_at", "client_messages", ["created_at"])

    op.create_table(
        "cases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_number", sa.String(50), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("case_type", sa.String(100), nullable=False),
        sa.Column("status", sa.Enum("active", "pending", "closed", "archived", name="casestatus"), nullable=False),
        sa.Column("priority", sa.Enum(*priority_level, name="prioritylevel"), nullable=False),
        sa.Column("court", sa.Text()),
        sa.Column("judge", sa.Text()),
        sa.Column("opposing_party", sa.Text()),
        sa.Column("opposing_lawyer", sa.Text()),
        sa.Column("filing_date", sa.DateTime()),
        sa.Column("hearing_date", sa.DateTime()),
        sa.Column("closing_date", sa.DateTime()),
        sa.Column("assigned_to", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_cases_case_number", "cases", ["case_number"], unique=True)
    op.create_index("ix_cases_client_id", "cases", ["client_id"])
    op.create_index("ix_cases_status", "cases", ["status"])

    op.create_table(
        "case_activities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("metadata", sa.JSON()),
        *timestamps(with_updated=False),
    )
    op.create_index("ix_case_activities_case_id", "case_activities", ["case_id"])
    op.create_index("ix_case_activities_user_id", "case_activities", ["user_id"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("assigned_to", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column(
            "status",
            sa.Enum("pending", "in_progress", "completed", "cancelled", name="taskstatus"),
            nullable=False
        ),
        sa.Column("priority", sa.Enum(*priority_level, name="prioritylevel"), nullable=False),
        sa.Column("due_date", sa.DateTime()),
        sa.Column("completed_at", sa.DateTime()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_tasks_case_id", "tasks", ["case_id"])
    op.create_index("ix_tasks_assigned_to", "tasks", ["assigned_to"])
    op.create_index("ix_tasks_status", "tasks", ["status"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("file_key", sa.Text(), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("category", sa.String(100)),
        sa.Column("tags", sa.JSON()),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("parent_document_id", sa.Integer(), sa.ForeignKey("documents.id")),
        sa.Column("uploaded_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime()),
        *timestamps(),
    )
    op.create_index("ix_documents_case_id", "documents", ["case_id"])
    op.create_index("ix_documents_category", "documents", ["category"])

    op.create_table(
        "shared_documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("document_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("share_token", sa.String(64), nullable=False),
        sa.Column("password_hash", sa.String(255)),
        sa.Column("permissions", sa.Enum("view", "download", "edit", name="sharepermission"), nullable=False),
        sa.Column("expires_at", sa.DateTime()),
        sa.Column("access_count", sa.Integer(), nullable=False),
        sa.Column("last_accessed_at", sa.DateTime()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(with_updated=False),
    )
    op.create_index("ix_shared_documents_share_token", "shared_documents", ["share_token"], unique=True)
    op.create_index("ix_shared_documents_document_id", "shared_documents", ["document_id"])

    op.create_table(
        "document_access_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("document_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id")),
        sa.Column("action", sa.Enum("view", "download", "share", name="accessaction"), nullable=False),
        sa.Column("ip_address", sa.String(45)),
        sa.Column("user_agent", sa.Text()),
        *timestamps(with_updated=False),
    )
    op.create_index("ix_document_access_log_document_id", "document_access_log", ["document_id"])

    op.create_table(
        "legal_templates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("template_content", sa.Text(), nullable=False),
        sa.Column("variables", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(),
    )

    op.create_table(
        "ai_extractions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("document_id", sa.Integer(), sa.ForeignKey("documents.id"), nullable=False),
        sa.Column("extraction_type", sa.String(50), nullable=False),
        sa.Column("extracted_data", sa.Text(), nullable=False),
        sa.Column("confidence", sa.Numeric(5, 2)),
        sa.Column("reviewed_by", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        *timestamps(with_updated=False),
    )
    op.create_index("ix_ai_extractions_document_id", "ai_extractions", ["document_id"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("draft", "pending", "sent", "paid", "overdue", "cancelled", name="invoicestatus"),
            nullable=False
        ),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("due_date", sa.DateTime()),
        sa.Column("paid_date", sa.DateTime()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"], unique=True)
    op.create_index("ix_invoices_case_id", "invoices", ["case_id"])
    op.create_index("ix_invoices_client_id", "invoices", ["client_id"])
    op.create_index("ix_invoices_status", "invoices", ["status"])

    op.create_table(
        "time_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("hours", sa.Numeric(5, 2), nullable=False),
        sa.Column("rate", sa.Numeric(10, 2)),
        sa.Column("amount", sa.Numeric(10, 2)),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("is_billable", sa.Boolean(), nullable=False),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id")),
        *timestamps(),
    )
    op.create_index("ix_time_entries_case_id", "time_entries", ["case_id"])
    op.create_index("ix_time_entries_user_id", "time_entries", ["user_id"])
    op.create_index("ix_time_entries_invoice_id", "time_entries", ["invoice_id"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("category", sa.String(100)),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("receipt_url", sa.Text()),
        sa.Column("is_billable", sa.Boolean(), nullable=False),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id")),
        *timestamps(),
    )
    op.create_index("ix_expenses_case_id", "expenses", ["case_id"])
    op.create_index("ix_expenses_user_id", "expenses", ["user_id"])
    op.create_index("ix_expenses_invoice_id", "expenses", ["invoice_id"])

    op.create_table(
        "calendar_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("case_id", sa.Integer(), sa.ForeignKey("cases.id")),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "event_type",
            sa.Enum("hearing", "meeting", "deadline", "consultation", "other", name="eventtype"),
            nullable=False
        ),
        sa.Column("status", sa.Enum("scheduled", "completed", "cancelled", name="eventstatus"), nullable=False),
        sa.Column("location", sa.Text()),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("attendees", sa.Text()),
        sa.Column("reminder_minutes", sa.Integer()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_calendar_events_case_id", "calendar_events", ["case_id"])
    op.create_index("ix_calendar_events_start_date", "calendar_events", ["start_date"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("related_id", sa.Integer()),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        *timestamps(with_updated=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])


def downgrade():
    for table in (
        "notifications",
        "calendar_events",
        "expenses",
        "time_entries",
        "invoices",
        "ai_extractions",
        "legal_templates",
        "document_access_log",
        "shared_documents",
        "documents",
        "tasks",
        "case_activities",
        "cases",
        "client_messages",
        "client_portal_auth",
        "clients",
        "users",
    ):
        op.drop_table(table)
