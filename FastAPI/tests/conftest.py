import os
from dataclasses import dataclass

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BEDROCK_LLM_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.rate_limiter import rate_limiter
from app.database import Base, get_db, make_engine
from app.dependencies import get_current_user
from app.main import app
from app.models.user import User
from app.services.review_workflow import Actor


@dataclass
class StubUser:
    id: str = "user-1"
    name: str = "Casey Candidate"
    email: str = "user@example.com"
    role: str = "candidate"
    is_active: bool = True
    password_hash: str = "hashed-password"


def _client_as(user):
    def _db_override():
        yield object()

    rate_limiter.reset()
    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = lambda: user
    return TestClient(app)


@pytest.fixture
def stub_user() -> StubUser:
    return StubUser()


@pytest.fixture
def mediator_user() -> StubUser:
    return StubUser(id="mediator-1", name="Sarah Reviewer", email="sarah@mediator.com", role="mediator")


@pytest.fixture
def admin_user() -> StubUser:
    return StubUser(id="admin-1", name="System Admin", email="admin@example.com", role="admin")


@pytest.fixture
def client(stub_user: StubUser):
    yield _client_as(stub_user)
    app.dependency_overrides.clear()


@pytest.fixture
def mediator_client(mediator_user: StubUser):
    yield _client_as(mediator_user)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(admin_user: StubUser):
    yield _client_as(admin_user)
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Real SQLAlchemy session on a private in-memory SQLite database."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    """Insert a user row directly (no bcrypt) and return it."""
    counter = {"n": 0}

    def _make(role: str = "candidate", name: str = "", email: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            id=f"{role}-{counter['n']}",
            name=name or f"{role.title()} {counter['n']}",
            email=email or f"{role}{counter['n']}@example.com",
            password_hash="x",
            role=role,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def actors(make_user):
    """One candidate, two mediators and an admin as workflow actors."""
    return {
        "owner": Actor.from_user(make_user("candidate")),
        "other_owner": Actor.from_user(make_user("candidate")),
        "mediator": Actor.from_user(make_user("mediator")),
        "mediator_2": Actor.from_user(make_user("mediator")),
        "admin": Actor.from_user(make_user("admin")),
    }


@pytest.fixture
def complete_content() -> dict:
    return {
        "full_name": "Jordan Lee",
        "email": "jordan@example.com",
        "phone": "",
        "summary": "Backend engineer focused on Python services.",
        "experience": [
            {"id": "e1", "role": "Backend Engineer", "company": "ACME", "duration": "2020 - Present", "description": "FastAPI, PostgreSQL"},
        ],
        "education": [],
        "skills": [{"id": "s1", "name": "Python", "level": "Expert"}],
        "projects": [],
        "certifications": [],
    }


@pytest.fixture
def api(db_session):
    """TestClient backed by the SQLite session; call api.as_user(user) to pick the caller."""
    def _db_override():
        yield db_session

    rate_limiter.reset()
    app.dependency_overrides[get_db] = _db_override
    test_client = TestClient(app)

    def _as_user(user):
        app.dependency_overrides[get_current_user] = lambda: user
        return test_client

    test_client.as_user = _as_user
    yield test_client
    app.dependency_overrides.clear()
