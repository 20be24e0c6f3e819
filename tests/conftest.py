"""Pytest configuration and fixtures."""

import os

# Use test database - PostgreSQL when TEST_DATABASE_URL is set, SQLite locally.
# Settings are read at import time, so the environment is prepared first.
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from todo_api import models  # noqa: E402, F401
from todo_api.database import Base, create_db_engine, get_db  # noqa: E402
from todo_api.main import app  # noqa: E402

engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "testpass123"


def register_user(
    client: TestClient,
    email: str = "test@example.com",
    name: str = "Test User",
    password: str = DEFAULT_PASSWORD,
) -> dict:
    """Register a user through the API. The client keeps the session cookie."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["user"]


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
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
def client_factory(client):
    """Build extra clients, each with its own cookie jar, sharing the test database."""
    created = []

    def make_client(**kwargs) -> TestClient:
        new_client = TestClient(app, **kwargs)
        created.append(new_client)
        return new_client

    yield make_client

    for created_client in created:
        created_client.close()


@pytest.fixture
def user(client):
    """Register the default user; ``client`` is logged in as them."""
    return register_user(client)


@pytest.fixture
def other_client(client_factory, user):
    """A second, separately logged-in user."""
    other = client_factory()
    register_user(other, email="other@example.com", name="Other User")
    return other


@pytest.fixture
def register():
    """The ``register_user`` helper, for tests that need extra accounts."""
    return register_user
