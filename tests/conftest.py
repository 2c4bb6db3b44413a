"""Shared test fixtures for all test modules."""

import contextlib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import receivables.models  # noqa: F401
from receivables.core import database as db_module
from receivables.core.database import Base, get_db
from receivables.main import app
from receivables.repositories.user_repository import UserRepository
from receivables.routers.auth import login_rate_limiter

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


def _seed_admin(session: Session) -> None:
    UserRepository(session).ensure(ADMIN_USERNAME, ADMIN_PASSWORD)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    session = _TestSessionLocal()
    try:
        _seed_admin(session)
    finally:
        session.close()

    login_rate_limiter.reset()

    yield

    with _test_engine.connect() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    """Create a database session for direct repository and service testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def token(client):
    resp = client.post(
        "/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
    )
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def invoice_payload():
    return {
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "customer_phone": "555-0100",
        "invoice_date": "2024-01-01",
        "due_date": "2024-01-15",
        "amount_due": 150.00,
        "notes": "January retainer",
    }
