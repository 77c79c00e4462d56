"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine on sqlite+aiosqlite:///:memory: with a
   StaticPool, so every session in the test sees the same database.
2. Tables are created with Base.metadata.create_all, then the app's
   get_db dependency is overridden to hand out sessions on that engine.
3. After the test the engine is disposed and the database vanishes.

Unlike stubbing get_current_user, the `client` fixture runs the real
auth pipeline: tests sign up, sign in, and carry the session cookie
exactly like a browser would.
"""

import os

# Must be set before filekeep.config is imported.
os.environ.setdefault("FILEKEEP_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("FILEKEEP_BCRYPT_ROUNDS", "4")
os.environ.setdefault("FILEKEEP_JWT_SECRET", "test-secret-0123456789abcdef0123456789")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from filekeep.db.engine import build_engine, get_db, init_models
from filekeep.main import app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture()
async def session_factory():
    engine = build_engine(TEST_DB_URL)
    await init_models(engine)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db pointed at the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def make_client(session_factory):
    """Factory for extra clients (separate cookie jars) on the same database.

    Learn: Two users need two browsers. Each client gets its own
    cookie jar, so user A's session never leaks into user B's requests.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def _make() -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _make

    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()


async def sign_up_and_in(client: AsyncClient, email: str, password: str = PASSWORD) -> dict:
    """Register a user and sign in on `client`; returns the user JSON."""
    r = await client.post(
        "/api/v1/users/signup", json={"email": email, "password": password}
    )
    assert r.status_code == 201, r.text
    r = await client.post(
        "/api/v1/users/signin", json={"email": email, "password": password}
    )
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def signed_in():
    """The sign_up_and_in helper, as a fixture."""
    return sign_up_and_in
