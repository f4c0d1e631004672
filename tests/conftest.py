"""Pytest configuration and fixtures."""

import os

# Must be set before src.config caches its settings
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
if not os.getenv("DATABASE_URL"):
    os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.database import Base, create_db_engine, define_schema, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.services.user_store import UserStore  # noqa: E402

# Running in Docker - use PostgreSQL test database; locally - SQLite
SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"].replace("/user_store", "/user_store_test")

engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    define_schema(engine)
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
def store(db):
    """User store bound to the test session."""
    return UserStore(db)


@pytest.fixture
def alice(store):
    """A persisted user whose plaintext password is ``hunter2``."""
    return store.create("alice", "alice@example.com", "hunter2")


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
