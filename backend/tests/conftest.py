"""Pytest fixtures for testing."""
import os

# Set environment before any app imports trigger Settings validation or engine creation
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-that-is-long-enough-for-hs256-signing"
os.environ["REDIS_ENABLED"] = "false"
os.environ.pop("TOKEN_EXPIRE_SECONDS", None)
os.environ.pop("ENVIRONMENT", None)

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fakeredis import FakeAsyncRedis  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.redis import RedisClient  # noqa: E402
from core.user_cache import UserCache  # noqa: E402
from models.base import Base  # noqa: E402
from models.user import User  # noqa: E402


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory database for each test.

    StaticPool keeps the single connection alive so every session sees the
    same in-memory database. The database disappears when the engine is disposed.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session on the per-test database."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def redis_client() -> AsyncGenerator[RedisClient]:
    """Redis client backed by an in-process fake server."""
    client = RedisClient("redis://fake:6379", client=FakeAsyncRedis())
    await client.connect()

    yield client

    await client.flushdb()
    await client.close()


@pytest.fixture
def user_cache(redis_client: RedisClient) -> UserCache:
    """User cache with the default one-hour TTL."""
    return UserCache(redis_client)


async def make_user(
    db_session: AsyncSession,
    username: str,
    birthdate: date = date(1990, 1, 1),
    name: str = "Test",
    surname: str | None = "User",
) -> User:
    """Insert and commit a user directly through the ORM."""
    user = User(name=name, surname=surname, username=username, birthdate=birthdate)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def alice(db_session: AsyncSession) -> User:
    """First test user."""
    return await make_user(db_session, "alice", date(1990, 5, 17), name="Alice")


@pytest.fixture
async def bob(db_session: AsyncSession) -> User:
    """Second test user."""
    return await make_user(db_session, "bob", date(1985, 11, 2), name="Bob")


@pytest.fixture
async def carol(db_session: AsyncSession) -> User:
    """Third test user."""
    return await make_user(db_session, "carol", date(2000, 2, 29), name="Carol", surname=None)


@pytest.fixture
async def client(
    db_session: AsyncSession,
    user_cache: UserCache,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override and a fake-Redis user cache."""
    # Clear the settings cache so it picks up the test environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from core.user_cache import get_user_cache
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_user_cache] = lambda: user_cache

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
