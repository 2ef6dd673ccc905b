"""Shared test fixtures for all test modules."""

import contextlib
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core import database as db_module
from app.core.auth import create_access_token
from app.core.database import Base, get_db
from app.models.subscription import Subscription
from app.models.user import User
from app.services.event_publisher import EventPublisher

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Well-known default user ID used across all tests
DEFAULT_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DEFAULT_USER_EMAIL = "ada@example.com"


def _seed_default_user(session: Session) -> None:
    """Insert the default user that owns test subscriptions."""
    user = session.query(User).filter(User.id == DEFAULT_USER_ID).first()
    if user is None:
        session.add(User(id=DEFAULT_USER_ID, name="Ada Lovelace", email=DEFAULT_USER_EMAIL))
        session.commit()


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
        _seed_default_user(session)
    finally:
        session.close()

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def session_factory():
    """The session factory background jobs use in tests."""
    return _TestSessionLocal


@pytest.fixture
def default_user_id():
    return DEFAULT_USER_ID


@pytest.fixture
def auth_headers():
    """Authorization header for the default user."""
    return {"Authorization": f"Bearer {create_access_token(DEFAULT_USER_ID)}"}


class RecordingPublisher(EventPublisher):
    """Publisher that keeps every delivered event in memory.

    ``fail_events`` names events whose delivery raises.
    """

    def __init__(self, fail_events: set[str] | None = None, timeout: float | None = None):
        super().__init__(timeout)
        self.fail_events = fail_events or set()
        self.sent: list[tuple[str | None, str, Any]] = []

    async def _send(self, room: str | None, event: str, payload: Any) -> None:
        if event in self.fail_events:
            raise ConnectionError(f"{event} delivery failed")
        self.sent.append((room, event, payload))

    def events(self) -> list[str]:
        return [event for _, event, _ in self.sent]


@pytest.fixture
def publisher():
    return RecordingPublisher()


def make_subscription(
    session: Session,
    next_renewal_date: datetime,
    *,
    name: str = "Netflix",
    amount: str = "649",
    billing_cycle: str = "Monthly",
    status: str = "Active",
    category: str = "Entertainment",
    currency: str = "INR",
    user_id: uuid.UUID = DEFAULT_USER_ID,
) -> Subscription:
    """Insert and commit a subscription row."""
    subscription = Subscription(
        user_id=user_id,
        name=name,
        category=category,
        amount=Decimal(amount),
        billing_cycle=billing_cycle,
        next_renewal_date=next_renewal_date,
        status=status,
        currency=currency,
    )
    session.add(subscription)
    session.commit()
    session.refresh(subscription)
    return subscription


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)
