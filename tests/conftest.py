"""
Pytest fixtures for testing
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from walletbook.api.deps import get_db
from walletbook.auth import create_user
from walletbook.infrastructure.db import models  # noqa: F401
from walletbook.infrastructure.db.session import Base
from walletbook.infrastructure.store import FinanceCache, FinanceStore
from walletbook.main import create_app

OWNER_EMAIL = "owner@example.com"
OWNER_PASSWORD = "correct-horse-battery"


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (TestClient runs sync routes in a pool)"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def cache():
    return FinanceCache()


@pytest.fixture
def store(db_session, cache) -> FinanceStore:
    return FinanceStore(db_session, cache)


@pytest.fixture
def app(db_session):
    """App wired to the test session"""
    application = create_app()
    application.dependency_overrides[get_db] = lambda: db_session
    return application


@pytest.fixture
def api_store(app, db_session) -> FinanceStore:
    """Store sharing the app's cache, for seeding data seen by the API"""
    return FinanceStore(db_session, app.state.finance_cache)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner(db_session):
    return create_user(db_session, OWNER_EMAIL, OWNER_PASSWORD)


@pytest.fixture
def auth_client(client, owner):
    """Client with a logged-in session cookie"""
    response = client.post(
        "/login",
        data={"email": OWNER_EMAIL, "password": OWNER_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 302
    return client
