"""
Pytest fixtures for the marketplace API tests.
Uses in-memory SQLite, mocks Redis, provides seeded freelancer/employer users and tokens.
"""
import os
import uuid
import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Use in-memory SQLite for tests - set before config/session load
# Must override any .env DATABASE_URL
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["REDIS_URL"] = ""
os.environ["MAIL_USER"] = ""
os.environ["MAIL_PASS"] = ""

from backend.app.db.base import Base
from backend.main import app
from backend.app.core.dependencies import get_db
from backend.app.core.security import get_password_hash, issue_token
from backend.app.models.employer import Employer
from backend.app.models.user import User

# In-memory SQLite for tests - StaticPool ensures all sessions share same DB
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Patch the session module so app uses our test engine
import backend.app.db.session as session_module
session_module.engine = engine
session_module.SessionLocal = TestingSessionLocal
# main.py imports engine directly; patch so startup uses our engine
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


def _make_user(db, email, role, full_name, title="", password="secret123"):
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
        profile_email=email,
        full_name=full_name,
        title=title,
        skills=[],
        active_projects=0,
        pending_applications=0,
        completed_projects=0,
        total_rating=0.0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def freelancer(db_session):
    """Freelancer user F1 (password secret123)."""
    return _make_user(db_session, "f1@example.com", "freelancer", "Fiona Lance", "Backend Developer")


@pytest.fixture
def second_freelancer(db_session):
    return _make_user(db_session, "f2@example.com", "freelancer", "Frank Second", "Designer")


def _make_employer_user(db, email, full_name, title):
    """Employer user with its Employer mirror row, as signup creates it."""
    user = _make_user(db, email, "employer", full_name, title)
    db.add(
        Employer(
            user_id=user.id,
            email=user.email,
            hashed_password=user.hashed_password,
            role="employer",
            full_name=user.full_name,
            title=user.title,
            active_jobs=0,
            total_applications=0,
            active_projects=0,
            draft_jobs=0,
        )
    )
    db.commit()
    return user


@pytest.fixture
def employer_user(db_session):
    return _make_employer_user(db_session, "boss@example.com", "Erin Boss", "CTO")


@pytest.fixture
def second_employer_user(db_session):
    return _make_employer_user(db_session, "owner@example.com", "Oscar Owner", "Founder")


@pytest.fixture
def auth_headers(freelancer):
    """Bearer token for the freelancer."""
    return {"Authorization": f"Bearer {issue_token(freelancer.id, freelancer.role)}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {issue_token(uuid.uuid4().hex, 'admin')}"}


@pytest.fixture
def client(db_session):
    """TestClient bound to the per-test database."""
    return TestClient(app)


@pytest.fixture
def job_payload(employer_user):
    """Minimal valid POST /api/jobs body for employer_user."""
    return {
        "employerId": str(employer_user.id),
        "title": "Build a landing page",
        "description": "React + Tailwind landing page for a SaaS product",
        "budgetType": "fixed",
        "budgetMin": 1000,
        "budgetMax": 5000,
        "experienceLevel": "intermediate",
        "skills": [{"id": 1, "name": "React", "category": "frontend"}],
    }


@pytest.fixture
def create_job(client, job_payload):
    """Factory: POST a job (optionally overriding fields) and return the JSON body."""

    def _create(**overrides):
        r = client.post("/api/jobs", json={**job_payload, **overrides})
        assert r.status_code == 201, r.text
        return r.json()

    return _create


@pytest.fixture
def apply(client):
    """Factory: POST /api/applications and return the response."""

    def _apply(job_id, freelancer_id, cover_letter="I can do this", **extra):
        body = {"jobId": job_id, "freelancerId": str(freelancer_id), "coverLetter": cover_letter, **extra}
        return client.post("/api/applications", json=body)

    return _apply


@pytest.fixture(autouse=True)
def mock_redis():
    """Mock Redis cache: get returns None (cache miss), set/delete no-op. Skip connect."""
    with patch("backend.app.utils.cache.get", new_callable=AsyncMock, return_value=None), \
         patch("backend.app.utils.cache.set", new_callable=AsyncMock), \
         patch("backend.app.utils.cache.delete", new_callable=AsyncMock), \
         patch("backend.app.utils.cache.connect", new_callable=AsyncMock), \
         patch("backend.app.utils.cache.close", new_callable=AsyncMock):
        yield


@pytest.fixture
def missing_id():
    """Well-formed user/employer id that matches no row."""
    return uuid.uuid4().hex
