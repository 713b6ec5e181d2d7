"""
Test configuration and fixtures for Recipe Box.

- Function-scoped database engine (in-memory SQLite unless TEST_DATABASE_URL is set)
- Tables created and dropped around every test
- TestClient with database dependency override
- Authenticated client fixtures
"""

import os

# Must be set before app modules build their engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from app.database import Base, build_engine, get_db
from app.main import app
from app.models import User, Session as UserSession
from tests.factories import create_session, create_user


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url() -> str:
    """
    Get the test database URL.

    Priority:
    1. TEST_DATABASE_URL environment variable
    2. In-memory SQLite
    """
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def test_engine():
    """
    Create a fresh engine and schema for each test.

    Services commit their own transactions, so isolation comes from dropping
    the tables afterwards rather than from rolling back.
    """
    engine = build_engine(get_test_database_url())
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the per-test engine."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()

    yield session

    session.rollback()
    session.close()


# =============================================================================
# TestClient Fixtures
# =============================================================================


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with database dependency override.

    The database session is injected into the app's get_db dependency.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    return create_user(
        db, username="testuser", email="testuser@example.com", password="testpassword123"
    )


@pytest.fixture
def test_session(db: Session, test_user: User) -> UserSession:
    """Create a test session for the test user."""
    return create_session(db, test_user)


@pytest.fixture
def auth_client(
    client: TestClient, test_session: UserSession
) -> TestClient:
    """TestClient that presents the test user's token as a Bearer header."""
    client.headers["Authorization"] = f"Bearer {test_session.token}"
    return client


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m not slow')"
    )
