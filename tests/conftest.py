"""
Pytest configuration and fixtures for PasteIt tests.

This module provides:
- In-memory SQLite engine and sessions
- Test client fixtures
- Account fixtures with known credentials
- Authentication header fixtures
"""

# Set environment variables BEFORE importing anything from pasteit
import os

os.environ["SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "8192"
os.environ["ARGON2_PARALLELISM"] = "1"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EXPIRY_SWEEP_INTERVAL_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pasteit.core.database import create_database_engine, create_session_factory, create_tables
from pasteit.core.security import create_session_token, hash_password
from pasteit.main import app
from pasteit.models.account import Account, default_preferences
from pasteit.models.enums import Role

TEST_PASSWORD = "TestPass123!"
ADMIN_PASSWORD = "AdminPass123!"


# ============================================================================
# Database Fixtures
# ============================================================================
@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a fresh in-memory database for one test.

    The static pool keeps a single connection, so every session sees the
    same in-memory database.
    """
    engine = create_database_engine("sqlite+aiosqlite://")
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(test_engine)


@pytest_asyncio.fixture
async def file_session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory over a SQLite file database.

    Unlike the in-memory engine, every session gets its own connection and
    transaction, so concurrent sessions behave as they do in production.
    """
    engine = create_database_engine(f"sqlite+aiosqlite:///{tmp_path / 'pasteit.db'}")
    await create_tables(engine)

    yield create_session_factory(engine)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for a test."""
    async with session_factory() as session:
        yield session


# ============================================================================
# FastAPI Client Fixtures
# ============================================================================
@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async test client backed by the test database.

    The lifespan does not run under ASGITransport, so the session factory is
    placed on app.state here, the way the lifespan would.
    """
    app.state.sessionmaker = session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.state.sessionmaker = None


# ============================================================================
# Account Fixtures
# ============================================================================
AccountFactory = Callable[..., Awaitable[Account]]


@pytest.fixture
def account_factory(session_factory: async_sessionmaker[AsyncSession]) -> AccountFactory:
    """
    Return a coroutine function that inserts an account and returns it.

    Each call uses its own committed session.
    """

    async def _create(
        username: str = "testuser",
        email: str = "testuser@example.com",
        password: str = TEST_PASSWORD,
        role: Role = Role.user,
        is_active: bool = True,
    ) -> Account:
        async with session_factory() as session:
            account = Account(
                username=username,
                email=email,
                password_hash=hash_password(password),
                role=role,
                is_active=is_active,
                preferences=default_preferences(),
            )
            session.add(account)
            await session.commit()
            await session.refresh(account)
            return account

    return _create


@pytest_asyncio.fixture
async def test_account(account_factory: AccountFactory) -> Account:
    """Regular active account with known credentials."""
    return await account_factory()


@pytest_asyncio.fixture
async def other_account(account_factory: AccountFactory) -> Account:
    """Second regular account, for ownership checks."""
    return await account_factory(username="otheruser", email="other@example.com")


@pytest_asyncio.fixture
async def admin_account(account_factory: AccountFactory) -> Account:
    """Account with the admin role."""
    return await account_factory(
        username="adminuser",
        email="admin@example.com",
        password=ADMIN_PASSWORD,
        role=Role.admin,
    )


@pytest_asyncio.fixture
async def inactive_account(account_factory: AccountFactory) -> Account:
    """Deactivated account."""
    return await account_factory(
        username="inactiveuser",
        email="inactive@example.com",
        is_active=False,
    )


# ============================================================================
# Authentication Fixtures
# ============================================================================
def bearer_headers(account: Account) -> dict[str, str]:
    """Authorization header carrying a session token for an account."""
    token = create_session_token(account.id, account.username, account.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_account: Account) -> dict[str, str]:
    """Authorization header for test_account."""
    return bearer_headers(test_account)


@pytest.fixture
def other_auth_headers(other_account: Account) -> dict[str, str]:
    """Authorization header for other_account."""
    return bearer_headers(other_account)


@pytest.fixture
def admin_headers(admin_account: Account) -> dict[str, str]:
    """Authorization header for admin_account."""
    return bearer_headers(admin_account)
