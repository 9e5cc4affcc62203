"""
Pytest fixtures for the job board API tests.
Uses in-memory SQLite, a fresh change feed per test, seeker and employer users with auth tokens.
"""
import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Use in-memory SQLite for tests - set before config/session load
# Must override any .env DATABASE_URL
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["STORAGE_BACKEND"] = "inline"

from backend.app.db.base import Base
from backend.main import app
from backend.app.core.config import settings
from backend.app.core.dependencies import get_db
from backend.app.core.security import create_access_token, get_password_hash
from backend.app.models.profile import UserProfile
from backend.app.models.user import User
from backend.app.services.change_feed import change_feed

# In-memory SQLite for tests - StaticPool ensures all sessions share same DB
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Patch the session module so app and view models use our test engine
import backend.app.db.session as session_module
session_module.engine = engine
session_module.SessionLocal = TestingSessionLocal
# main.py imports engine directly
import backend.main as main_module
main_module.engine = engine


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def db_session():
    """Create tables and a fresh DB session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Session factory for view models (tables already created)."""
    return TestingSessionLocal


@pytest.fixture(autouse=True)
def fresh_change_feed():
    """No subscriber leaks between tests."""
    change_feed.reset()
    yield change_feed
    change_feed.reset()


@pytest.fixture
def inline_storage(monkeypatch):
    monkeypatch.setattr(settings, "storage_backend", "inline")


@pytest.fixture
def local_storage(monkeypatch, tmp_path):
    """Blob mode: files written under a temp upload dir."""
    monkeypatch.setattr(settings, "storage_backend", "local")
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    return tmp_path / "uploads"


def _make_user(db_session, user_id, email, full_name, role):
    user = User(
        id=user_id,
        full_name=full_name,
        email=email,
        hashed_password=get_password_hash("testpass123"),
        role=role,
        is_active=1,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def seeker_user(db_session):
    """Job seeker with a filled-in profile."""
    user = _make_user(db_session, 1, "seeker@example.com", "Ana Reyes", "jobseeker")
    db_session.add(
        UserProfile(
            user_id=user.id,
            full_name="Ana Reyes",
            email="seeker@example.com",
            phone="09171234567",
            contact_number="09171234567",
            desired_job="Cashier",
            skills="cash handling, customer service",
            education="College",
        )
    )
    db_session.commit()
    return user


@pytest.fixture
def other_seeker(db_session):
    user = _make_user(db_session, 3, "other@example.com", "Ben Cruz", "jobseeker")
    db_session.add(UserProfile(user_id=user.id, full_name="Ben Cruz", email="other@example.com"))
    db_session.commit()
    return user


@pytest.fixture
def employer_user(db_session):
    return _make_user(db_session, 2, "employer@example.com", "Acme Foods", "employer")


@pytest.fixture
def other_employer(db_session):
    return _make_user(db_session, 4, "rival@example.com", "Rival Corp", "employer")


def _headers(user):
    token = create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def seeker_headers(seeker_user):
    """Bearer token for the seeker."""
    return _headers(seeker_user)


@pytest.fixture
def other_seeker_headers(other_seeker):
    return _headers(other_seeker)


@pytest.fixture
def employer_headers(employer_user):
    """Bearer token for the employer."""
    return _headers(employer_user)


@pytest.fixture
def other_employer_headers(other_employer):
    return _headers(other_employer)


@pytest.fixture
def client(db_session):
    """TestClient with tables created."""
    return TestClient(app)


@pytest.fixture
def job_payload():
    return {
        "jobTitle": "Cashier",
        "jobDescription": "Handle the counter",
        "contactNumber": "09170000000",
        "address": "1 Main St",
        "barangay": "Poblacion",
        "applicantLimit": "",
        "jobStatus": "open",
        "jobType": "full-time",
    }


@pytest.fixture
def posted_job(client, employer_headers, job_payload):
    """One open job posted by the employer, as returned by the API."""
    r = client.post("/api/employer/jobs", headers=employer_headers, json=job_payload)
    assert r.status_code == 201
    return r.json()
