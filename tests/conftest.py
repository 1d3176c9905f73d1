"""Pytest configuration and fixtures."""

import os

# Settings are cached on first import, so point them at the test database first
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ["MAIL_BACKEND"] = "console"
os.environ["ENVIRONMENT"] = "test"
os.environ["BASE_URL"] = "http://testserver"
os.environ["UNSUBSCRIBE_SECRET"] = "test-secret"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.api.dependencies import get_mailer  # noqa: E402
from src.database import Base, engine, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models.user import User  # noqa: E402
from src.services.mail import Mailer  # noqa: E402

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from src import models  # noqa: F401

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


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mailer(client):
    """Replace the mailer with a mock that records sent messages."""
    fake = MagicMock(spec=Mailer)
    fake.send_verification_email = AsyncMock()
    fake.send_flood_alert = AsyncMock()
    app.dependency_overrides[get_mailer] = lambda: fake
    return fake


@pytest.fixture
def make_user(db):
    """Factory inserting a user with the given flags."""

    def _make_user(
        email: str = "rider@example.com",
        is_verified: bool = False,
        is_subscribed: bool = False,
        token: str | None = None,
    ) -> User:
        user = User(email=email, is_verified=is_verified, is_subscribed=is_subscribed)
        if token:
            user.verification_token = token
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user
