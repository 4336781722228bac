"""
Test configuration and fixtures for the status page API tests.
"""
import os

# configure before any statuspage module reads settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"

from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from statuspage.api.dependencies import get_db_session
from statuspage.api.main import app
from statuspage.core.security import authenticator
from statuspage.db.models import Base, ComponentGroup, Role, User


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_sqlite_fks(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async client talking to the app with the test session injected."""

    async def override_get_db_session():
        yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(base_url="http://test", transport=httpx.ASGITransport(app=app)) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def isolated_client(engine: AsyncEngine) -> AsyncIterator[AsyncClient]:
    """Client opening a new session per request, the way the app does.

    A rejected request's session is closed without commit, so its writes
    are only visible if they were actually committed.
    """
    maker = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db_session():
        async with maker() as request_session:
            yield request_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(base_url="http://test", transport=httpx.ASGITransport(app=app)) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_role(session: AsyncSession) -> Role:
    role = Role(name="admin", description="Full access", permissions={"all": True})
    session.add(role)
    await session.flush()
    return role


@pytest_asyncio.fixture
async def admin_user(session: AsyncSession, admin_role: Role) -> User:
    user = User(
        username="admin",
        hashed_password=authenticator.hash_password("admin-password"),
        role_id=admin_role.id,
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def viewer_user(session: AsyncSession) -> User:
    role = Role(name="viewer", permissions={"manage_incidents": False})
    session.add(role)
    await session.flush()
    user = User(
        username="viewer",
        hashed_password=authenticator.hash_password("viewer-password"),
        role_id=role.id,
    )
    session.add(user)
    await session.commit()
    return user


def _headers(user: User) -> dict[str, str]:
    token = authenticator.issue_token({"sub": str(user.id), "username": user.username, "role_id": user.role_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return _headers(admin_user)


@pytest.fixture
def viewer_headers(viewer_user: User) -> dict[str, str]:
    return _headers(viewer_user)


@pytest_asyncio.fixture
async def group(session: AsyncSession) -> ComponentGroup:
    group = ComponentGroup(name="Core", display_order=0)
    session.add(group)
    await session.flush()
    return group
