from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Enum, Numeric, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
import enum


def _enum(enum_cls):
    # Persist the enum values ("in_progress"), not the member names ("IN_PROGRESS")
    return Enum(enum_cls, values_callable=lambda members: [m.value for m in members])

# =====================================================
# ENUMS
# =====================================================

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    LAWYER = "lawyer"
    CLIENT = "client"

class ClientType(str, enum.Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"

class ClientStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class CaseStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    CLOSED = "closed"
    ARCHIVED = "archived"

class PriorityLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

class SharePermission(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"
    EDIT = "edit"

class AccessAction(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"
    SHARE = "share"

class EventType(str, enum.Enum):
    HEARING = "hearing"
    MEETING = "meeting"
    DEADLINE = "deadline"
    CONSULTATION = "consultation"
    OTHER = "other"

class EventStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class SenderType(str, enum.Enum):
    CLIENT = "client"
    LAWYER = "lawyer"

# =====================================================
# STAFF USERS
# =====================================================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(_enum(UserRole), default=UserRole.USER, nullable=False)
    phone = Column(String(20))
    avatar = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    last_signed_in = Column(DateTime)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

# =====================================================
# CLIENTS & CLIENT PORTAL
# =====================================================

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(String(320), index=True)
    phone = Column(String(20), index=True)
    address = Column(Text)
    national_id = Column(String(20))
    company_name = Column(Text)
    company_registration = Column(String(50))
    type = Column(_enum(ClientType), default=ClientType.INDIVIDUAL, nullable=False)
    status = Column(_enum(ClientStatus), default=ClientStatus.ACTIVE, nullable=False)
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    cases = relationship("Case", back_populates="client")
    invoices = relationship("Invoice", back_populates="client")
    portal_auth = relationship("ClientPortalAuth", back_populates="client", uselist=False)

class ClientPortalAuth(Base):
    __tablename__ = "client_portal_auth"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    invite_token = Column(String(128), unique=True, index=True)
    invite_expiry = Column(DateTime)
    is_active = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    client = relationship("Client", back_populates="portal_auth")

class ClientMessage(Base):
    __tablename__ = "client_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    sender_id = Column(Integer, nullable=False)
    sender_type = Column(_enum(SenderType), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now(), index=True)

# =====================================================
# CASE MANAGEMENT
# =====================================================

class Case(Base):
    __tablename__ = "cases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_number = Column(String(50), unique=True, nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    case_type = Column(String(100), nullable=False)  # e.g. "تجاري", "جنائي", "مدني"
    status = Column(_enum(CaseStatus), default=CaseStatus.ACTIVE, nullable=False, index=True)
    priority = Column(_enum(PriorityLevel), default=PriorityLevel.MEDIUM, nullable=False)
    court = Column(Text)
    judge = Column(Text)
    opposing_party = Column(Text)
    opposing_lawyer = Column(Text)
    filing_date = Column(DateTime)
    hearing_date = Column(DateTime)
    closing_date = Column(DateTime)
    assigned_to = Column(Integer, ForeignKey("users.id"))
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    client = relationship("Client", back_populates="cases")
    assigned_lawyer = relationship("User", foreign_keys=[assigned_to])
    activities = relationship("CaseActivity", back_populates="case")
    documents = relationship("Document", back_populates="case")

class CaseActivity(Base):
    __tablename__ = "case_activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    activity_type = Column(String(50), nullable=False)  # created, status_changed, assigned ...
    description = Column(Text, nullable=False)
    activity_metadata = Column("metadata", JSON)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    case = relationship("Case", back_populates="activities")

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    assigned_to = Column(Integer, ForeignKey("users.id"), index=True)
    status = Column(_enum(TaskStatus), default=TaskStatus.PENDING, nullable=False, index=True)
    priority = Column(_enum(PriorityLevel), default=PriorityLevel.MEDIUM, nullable=False)
    due_date = Column(DateTime)
    completed_at = Column(DateTime)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

# =====================================================
# DOCUMENT MANAGEMENT
# =====================================================

class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    file_key = Column(Text, nullable=False)
    file_url = Column(Text, nullable=False)
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)
    category = Column(String(100), index=True)  # e.g. "عقد", "حكم", "مذكرة"
    tags = Column(JSON)
    version = Column(Integer, default=1, nullable=False)
    parent_document_id = Column(Integer, ForeignKey("documents.id"))
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    case = relationship("Case", back_populates="documents")
    parent_document = relationship("Document", remote_side=[id])
    shares = relationship("SharedDocument", back_populates="document")

class SharedDocument(Base):
    __tablename__ = "shared_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    share_token = Column(String(64), unique=True, nullable=False, index=True)
    password_hash = Column(String(255))
    permissions = Column(_enum(SharePermission), default=SharePermission.VIEW, nullable=False)
    expires_at = Column(DateTime)
    access_count = Column(Integer, default=0, nullable=False)
    last_accessed_at = Column(DateTime)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    document = relationship("Document", back_populates="shares")

class DocumentAccessLog(Base):
    __tablename__ = "document_access_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"))
    client_id = Column(Integer, ForeignKey("clients.id"))
    action = Column(_enum(AccessAction), nullable=False)
    ip_address = Column(String(45))
    user_agent = Column(Text)
    created_at = Column(DateTime, default=func.now())

class LegalTemplate(Base):
    __tablename__ = "legal_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text)
    category = Column(String(100), nullable=False)  # "عقد", "لائحة", "مذكرة"
    template_content = Column(Text, nullable=False)
    variables = Column(Text)  # JSON list of variable names or free text
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

class AIExtraction(Base):
    __tablename__ = "ai_extractions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    extraction_type = Column(String(50), nullable=False)  # entities, dates, classification ...
    extracted_data = Column(Text, nullable=False)
    confidence = Column(Numeric(5, 2))
    reviewed_by = Column(Integer, ForeignKey("users.id"))
    is_approved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now())

# =====================================================
# BILLING
# =====================================================

class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    hours = Column(Numeric(5, 2), nullable=False)
    rate = Column(Numeric(10, 2))
    amount = Column(Numeric(10, 2))
    date = Column(DateTime, nullable=False)
    is_billable = Column(Boolean, default=True, nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), index=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100))  # e.g. "رسوم محكمة", "سفر"
    date = Column(DateTime, nullable=False)
    receipt_url = Column(Text)
    is_billable = Column(Boolean, default=True, nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), index=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    case_id = Column(Integer, ForeignKey("cases.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    status = Column(_enum(InvoiceStatus), default=InvoiceStatus.DRAFT, nullable=False, index=True)

    # Amounts
    subtotal = Column(Numeric(10, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), default=15, nullable=False)  # VAT 15%
    tax_amount = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), default=0, nullable=False)
    total = Column(Numeric(10, 2), nullable=False)

    notes = Column(Text)
    due_date = Column(DateTime)
    paid_date = Column(DateTime)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    client = relationship("Client", back_populates="invoices")

# =====================================================
# CALENDAR & NOTIFICATIONS
# =====================================================

class CalendarEvent(Base):
    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id"), index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    event_type = Column(_enum(EventType), default=EventType.OTHER, nullable=False)
    status = Column(_enum(EventStatus), default=EventStatus.SCHEDULED, nullable=False)
    location = Column(Text)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    attendees = Column(Text)
    reminder_minutes = Column(Integer, default=30)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)  # case_update, task_assigned, invoice_due
    related_id = Column(Integer)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=func.now())
