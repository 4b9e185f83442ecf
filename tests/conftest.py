import os
from typing import Any, AsyncGenerator, Awaitable, Callable, Generator, TypeVar
from unittest.mock import AsyncMock, MagicMock

# Must be set before direct_messaging.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DIRECTORY_PROVIDER_API_KEY", "test-directory-key")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import direct_messaging.models  # noqa: E402,F401
from direct_messaging.database import Base, get_db, get_session_factory  # noqa: E402
from direct_messaging.dependencies import get_notifier  # noqa: E402
from direct_messaging.main import app  # noqa: E402
from direct_messaging.realtime.connection_manager import (  # noqa: E402
    ConnectionManager,
)
from direct_messaging.realtime.notifier import RealtimeNotifier  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

T = TypeVar("T")


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema."""
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A database session for integration tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def run_in_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[Callable[[AsyncSession], Awaitable[T]]], Awaitable[T]]:
    """Run one unit of work in a fresh session, like a separate request would."""

    async def runner(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with session_factory() as session:
            return await work(session)

    return runner


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create a mock database session for unit tests."""
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()
    mock_session.refresh = AsyncMock()
    mock_session.flush = AsyncMock()
    mock_session.execute = AsyncMock()
    mock_session.add = MagicMock()  # add is sync, not async
    mock_session.add_all = MagicMock()
    return mock_session


@pytest.fixture
def test_notifier() -> RealtimeNotifier:
    """A notifier with its own subscriber registry."""
    return RealtimeNotifier(ConnectionManager())


@pytest.fixture
async def api_client(
    session_factory: async_sessionmaker[AsyncSession],
    test_notifier: RealtimeNotifier,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the app with the test database wired in."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_notifier] = lambda: test_notifier

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def client() -> Generator[TestClient, Any, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client
