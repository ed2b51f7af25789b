"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta

# Cheap bcrypt cost for tests; must be set before the hashing context is built
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from diary_auth.database import Base, init_db  # noqa: E402
from diary_auth.models.user import User  # noqa: E402
from diary_auth.schemas.auth import RegisterRequest  # noqa: E402
from diary_auth.services.auth import AuthService  # noqa: E402

# Use test database - PostgreSQL when DATABASE_URL points at one, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"] + "_test"
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier:
    """Notifier that keeps every reset it was asked to deliver."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send_password_reset(self, email: str, token: str) -> None:
        self.sent.append((email, token))

    @property
    def last_token(self) -> str:
        return self.sent[-1][1]


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    init_db(engine)
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
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 0, tzinfo=UTC))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def auth_service(db, clock, notifier):
    return AuthService(db, notifier=notifier, clock=clock)


@pytest.fixture
def registered_user(db, auth_service) -> User:
    """Register alice and return the stored record."""
    result = auth_service.register(
        RegisterRequest(
            username="alice",
            email="alice@x.com",
            password="Secret123",
            confirm_password="Secret123",
            first_name="Alice",
            last_name="Liddell",
        )
    )
    assert result.success
    return db.query(User).filter(User.username == "alice").one()
