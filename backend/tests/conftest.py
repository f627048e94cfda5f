"""
Blog List Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Unit tests (no database):
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    └── sample_user: transient User row

    Endpoint tests (temporary SQLite database per test):
    ├── session_factory: aiosqlite engine with all tables created
    ├── test_app: fresh app with get_db_session overridden
    ├── test_client: HTTPX AsyncClient over ASGITransport
    ├── seeded_blogs: the two initial blogs, stored without an owner
    └── register_and_login: factory fixture returning a bearer token
"""

import os
import tempfile

# Override settings for testing BEFORE any bloglist imports
# (settings, the engine and the bcrypt context are built at import time)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="bloglist_test_"), "unused.db"
)
os.environ["SECRET_KEY"] = "test-secret-not-for-production"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # bcrypt minimum, keeps the suite fast
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from typing import AsyncGenerator, Callable, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from bloglist.database import Base, get_db_session
from bloglist.main import create_app
from bloglist.models import Blog, User
from bloglist.security import hash_password

INITIAL_BLOGS: List[Dict] = [
    {
        "title": "React patterns",
        "author": "Michael Chan",
        "url": "https://reactpatterns.com/",
        "likes": 7,
    },
    {
        "title": "Go To Statement Considered Harmful",
        "author": "Edsger W. Dijkstra",
        "url": "http://www.u.arizona.edu/~rubinson/copyright_violations/Go_To_Considered_Harmful.html",
        "likes": 5,
    },
]


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        result = MagicMock()
        result.scalar_one_or_none.return_value = blog
        mock_db_session.execute.return_value = result
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_user():
    """A transient (never persisted) user, usable as a service argument."""
    return User(
        id=uuid.uuid4(),
        username="mluukkai",
        name="Matti Luukkainen",
        password_hash="not-a-real-hash",
        blogs=[],
    )


# ══════════════════════════════════════════════════════════════════════════
# Endpoint-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """A fresh SQLite database with the full schema, disposed after the test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def test_app(session_factory):
    """
    A fresh application whose session dependency points at the test database.

    Same commit/rollback semantics as bloglist.database.get_db_session.
    """
    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX AsyncClient routed straight into the ASGI app (no server)."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def seeded_blogs(session_factory) -> List[Blog]:
    """Stores INITIAL_BLOGS (ownerless, as seeded fixtures have no creator)."""
    blogs = [Blog(id=uuid.uuid4(), **data) for data in INITIAL_BLOGS]
    async with session_factory() as session:
        for blog in blogs:
            session.add(blog)
            await session.flush()
        await session.commit()
    return blogs


@pytest.fixture
def blogs_in_db(session_factory) -> Callable:
    """Returns a coroutine function listing every stored blog row."""

    async def _blogs_in_db() -> List[Blog]:
        async with session_factory() as session:
            result = await session.execute(select(Blog).order_by(Blog.created_at, Blog.id))
            return list(result.scalars().all())

    return _blogs_in_db


@pytest.fixture
def register_and_login(test_client) -> Callable:
    """
    Returns a coroutine function that registers a user through the API,
    logs in, and returns the bearer token.
    """

    async def _register_and_login(
        username: str = "test user",
        name: str = "Testuser",
        password: str = "password",
    ) -> str:
        created = await test_client.post(
            "/api/users",
            json={"username": username, "name": name, "password": password},
        )
        assert created.status_code == 200, created.text
        response = await test_client.post(
            "/api/login",
            json={"username": username, "password": password},
        )
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _register_and_login


@pytest.fixture
def stored_user(session_factory) -> Callable:
    """Returns a coroutine function that inserts a user directly (no HTTP)."""

    async def _stored_user(username: str = "root", password: str = "sekret") -> User:
        user = User(
            id=uuid.uuid4(),
            username=username,
            name=username.title(),
            password_hash=hash_password(password),
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
        return user

    return _stored_user
