"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_email_service
from src.database import Base, get_db
from src.errors import EmailDeliveryError
from src.main import app
from src.models.enums import Role
from src.models.user import User

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/auth_service", "/auth_service_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# The session cookie is Secure, so the test client must talk HTTPS to get it back
BASE_URL = "https://testserver"


class FakeEmailService:
    """Records outgoing emails instead of sending them."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send(self, subject: str, send_to: str, template: str, name: str, url: str):
        if self.fail:
            raise EmailDeliveryError(f"Could not send email to {send_to}")
        self.sent.append(
            {"subject": subject, "to": send_to, "template": template, "name": name, "url": url}
        )

    @property
    def last_token(self) -> str:
        """The one-time value at the end of the most recent link."""
        return self.sent[-1]["url"].rsplit("/", 1)[-1]


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def outbox():
    """Fake email service shared by the app for one test."""
    return FakeEmailService()


@pytest.fixture(scope="function")
def client(db, outbox):
    """Create a test client with database and email overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: outbox
    with TestClient(app, base_url=BASE_URL) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Register a user; the client keeps the session cookie."""
    response = client.post(
        "/api/v1/register",
        json={"name": "Test User", "email": "test@example.com", "password": "testpass123"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def make_user(db):
    """Factory that inserts a user directly into the store."""

    def _make_user(
        email: str,
        password: str = "password123",
        role: Role = Role.USER,
        is_verified: bool = False,
        name: str = "Someone",
    ) -> User:
        user = User(name=name, email=email, role=role, is_verified=is_verified)
        user.password = password
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login(client):
    """Log the client in as the given user; returns the response body."""

    def _login(email: str, password: str = "password123") -> dict:
        response = client.post("/api/v1/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return response.json()

    return _login
