"""
Pytest configuration and fixtures for testing.
"""
import os

# Test database URL - use environment variable if available (for Docker)
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///./test_eventportal.db"
)

# Settings are read at import time, so these must be in place before the app is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Iterable
from datetime import timedelta
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.session import Base, get_session
from app.core.security import hash_password, create_access_token
from app.core.timeutils import utcnow
from app.db.models import Account, Event, Guest, ADMIN_ROLE, ORGANISER_ROLE
from app.db.repositories import create_role
from app.db.repositories.accounts import get_role

TEST_PASSWORD = "Test@123"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)

# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh schema and session for each test, with both roles in place.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        await create_role(session, ADMIN_ROLE)
        await create_role(session, ORGANISER_ROLE)
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client bound to the app, sharing the test session.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_account(
    session: AsyncSession,
    email: str,
    full_name: str,
    roles: Iterable[str],
    password: str = TEST_PASSWORD,
) -> Account:
    account = Account(
        email=email,
        full_name=full_name,
        hashed_password=hash_password(password),
    )
    account.roles = [await get_role(session, name) for name in roles]
    session.add(account)
    await session.commit()
    return account


async def make_event(session: AsyncSession, owner: Account, title: str, days_from_now: int) -> Event:
    event = Event(
        title=title,
        description=f"Description for {title}",
        location="Nairobi Garage",
        event_date=utcnow() + timedelta(days=days_from_now),
        owner_id=owner.id,
    )
    event.owner = owner
    session.add(event)
    await session.commit()
    return event


async def make_guest(session: AsyncSession, event: Event, email: str, full_name: str = "Jane Guest") -> Guest:
    guest = Guest(
        full_name=full_name,
        email=email,
        phone_number="+254 700 000000",
        event_id=event.id,
    )
    guest.event = event
    session.add(guest)
    await session.commit()
    return guest


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def organiser(db_session: AsyncSession) -> Account:
    return await make_account(db_session, "organiser@example.com", "Olive Organiser", [ORGANISER_ROLE])


@pytest_asyncio.fixture
async def other_organiser(db_session: AsyncSession) -> Account:
    return await make_account(db_session, "other@example.com", "Otto Organiser", [ORGANISER_ROLE])


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> Account:
    return await make_account(db_session, "admin@example.com", "Ada Admin", [ADMIN_ROLE])


@pytest.fixture
def organiser_token(organiser: Account) -> str:
    return create_access_token({"sub": str(organiser.id), "roles": [ORGANISER_ROLE]})


@pytest.fixture
def other_organiser_token(other_organiser: Account) -> str:
    return create_access_token({"sub": str(other_organiser.id), "roles": [ORGANISER_ROLE]})


@pytest.fixture
def admin_token(admin: Account) -> str:
    return create_access_token({"sub": str(admin.id), "roles": [ADMIN_ROLE]})


@pytest_asyncio.fixture
async def future_event(db_session: AsyncSession, organiser: Account) -> Event:
    return await make_event(db_session, organiser, "Python Meetup", days_from_now=7)


@pytest_asyncio.fixture
async def past_event(db_session: AsyncSession, organiser: Account) -> Event:
    return await make_event(db_session, organiser, "Last Year's Hackathon", days_from_now=-30)


@pytest.fixture(autouse=True)
def mock_password_hashing(monkeypatch):
    """
    Mock bcrypt password hashing for testing environments where bcrypt cannot be installed.
    This fixture is autouse, so it applies to all tests automatically.
    """
    class MockPasswordContext:
        def hash(self, password: str) -> str:
            return f"$2b$12$mockedhash{password}"

        def verify(self, plain: str, hashed: str) -> bool:
            return hashed == f"$2b$12$mockedhash{plain}"

    from app.core import security
    monkeypatch.setattr(security, "pwd_context", MockPasswordContext())


class FakeCache:
    """In-memory stand-in for the Redis revocation list."""

    def __init__(self):
        self.store = {}
        self.available = True

    async def set(self, key, value, expire=300):
        if not self.available:
            return False
        self.store[key] = value
        return True

    async def exists(self, key):
        return key in self.store


@pytest.fixture(autouse=True)
def fake_cache(monkeypatch) -> FakeCache:
    from app.core import security
    cache = FakeCache()
    monkeypatch.setattr(security, "cache", cache)
    return cache


@pytest.fixture(autouse=True)
def disable_rate_limiting(monkeypatch):
    """Disable rate limiting for all tests."""
    from app.core.rate_limit import limiter
    monkeypatch.setattr(limiter, "enabled", False)
