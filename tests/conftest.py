"""Pytest configuration and shared fixtures."""

import os

# Settings are cached on first use; point them at SQLite before any import.
os.environ.setdefault("CAMPUS_DATABASE_URL", "sqlite://")
os.environ.setdefault("CAMPUS_SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campus_events.core.security import create_access_token
from campus_events.db.base import Base
from campus_events.db import models  # noqa: F401


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads, schema created from the models."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Database session for a single test."""
    Session = sessionmaker(bind=engine, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """TestClient whose requests use the test's database session."""
    from campus_events.api.deps import get_db
    from campus_events.api.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer auth headers for a user."""
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers
