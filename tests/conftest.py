"""
Test configuration and fixtures for the alias service.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from main import app
from alias_service.database.connection import Base, create_db_engine, get_db

# Test database configuration (file backed so several threads can share it)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_db_engine(SQLALCHEMY_DATABASE_URL, connect_args={"timeout": 30})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def tables():
    """Create tables for one test and drop them afterwards."""
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(tables):
    """
    Session factory for tests that open one session per thread,
    the way concurrent requests do.
    """
    return TestingSessionLocal


@pytest.fixture(scope="function")
def db_session(tables):
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class SequenceAliasStrategy:
    """Alias strategy that replays a fixed list of candidates."""

    def __init__(self, *aliases):
        self._aliases = list(aliases)
        self.calls = 0

    def generate(self) -> str:
        alias = self._aliases[min(self.calls, len(self._aliases) - 1)]
        self.calls += 1
        return alias


@pytest.fixture
def sequence_strategy():
    return SequenceAliasStrategy
