import json
import os
from types import SimpleNamespace

# Configure before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["APP_URL"] = "https://office.example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.database import Base, get_db
from app.documents.storage import LocalFileStorage, get_storage
from app.services.llm_service import get_llm_client
from app.auth.utils import get_password_hash, create_access_token
from app.models import User, UserRole, Client, ClientType, Case, Document

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

STAFF_PASSWORD = "staff-password"
STAFF_PASSWORD_HASH = get_password_hash(STAFF_PASSWORD)


class FakeCompletions:
    def __init__(self, owner):
        self.owner = owner

    def create(self, **kwargs):
        self.owner.calls.append(kwargs)
        if self.owner.error is not None:
            raise self.owner.error
        content = self.owner.replies.pop(0) if self.owner.replies else "{}"
        if not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLMClient:
    """Stands in for openai.OpenAI; queue replies with `reply()`."""

    def __init__(self):
        self.calls = []
        self.replies = []
        self.error = None
        self.chat = SimpleNamespace(completions=FakeCompletions(self))

    def reply(self, content):
        self.replies.append(content)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def llm():
    return FakeLLMClient()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(str(tmp_path / "uploads"))


@pytest.fixture
def client(db, llm, storage):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_llm_client] = lambda: llm
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, email="lawyer@example.com", role=UserRole.LAWYER, name="Layla Hassan"):
    user = User(name=name, email=email, password_hash=STAFF_PASSWORD_HASH, role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers_for(user):
    token = create_access_token({"sub": user.email, "role": user.role.value, "kind": "staff"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_user(db):
    return make_user(db)


@pytest.fixture
def auth_headers(staff_user):
    return auth_headers_for(staff_user)


@pytest.fixture
def sample_client(db, staff_user):
    record = Client(
        name="Omar Al-Farsi",
        email="omar@example.com",
        phone="0500000001",
        type=ClientType.INDIVIDUAL,
        created_by=staff_user.id
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def sample_case(db, staff_user, sample_client):
    case = Case(
        case_number="CASE-TEST-0001",
        title="Commercial lease dispute",
        client_id=sample_client.id,
        case_type="تجاري",
        assigned_to=staff_user.id,
        created_by=staff_user.id
    )
    db.add(case)
    db.commit()
    db.refresh(case)
    return case


@pytest.fixture
def sample_document(db, staff_user, sample_case, storage):
    key = storage.build_key("documents", staff_user.id, "lease.pdf")
    url = storage.put(key, b"%PDF-1.4 lease agreement")
    document = Document(
        case_id=sample_case.id,
        title="Lease agreement",
        file_key=key,
        file_url=url,
        file_name="lease.pdf",
        file_size=24,
        mime_type="application/pdf",
        category="عقد",
        tags=["lease"],
        uploaded_by=staff_user.id
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document
