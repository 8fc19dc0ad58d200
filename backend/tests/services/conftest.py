"""Service test fixtures — async DB, image directory and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets its own images directory under tmp_path
    - get_db and get_settings dependencies overridden for the test client
    - alice and bob are registered users with valid bearer tokens

Design Decisions:
    - SQLite in-memory with StaticPool: all sessions share one connection, so the
      test session sees what the app committed
    - Password hashing iterations lowered: registration speed, not hash strength,
      matters in tests
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import marketplace.models  # noqa: F401
from marketplace.config import Settings, get_settings
from marketplace.db.base import Base
from marketplace.infrastructure.database import get_db
from marketplace.infrastructure.image_storage import LocalImageStore
from marketplace.main import app
from marketplace.services.identity import IdentityService
from tests.services.factories import auth, listing_payload, user_payload


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        images_path=str(tmp_path / "images"),
        token_secret="test-token-secret",
        password_hash_iterations=1_000,
    )


@pytest.fixture
def image_store(test_settings) -> LocalImageStore:
    return LocalImageStore(test_settings.images_path)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_session_factory, test_settings):
    """FastAPI test client with DB and settings dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


async def _register_and_login(session_factory, settings, username: str) -> str:
    async with session_factory() as db:
        identity = IdentityService(db, settings)
        await identity.register(user_payload(username))
        token, _ = await identity.login(
            {"username": username, "password": f"{username}-secret"},
        )
    return token


@pytest.fixture
async def alice_token(test_session_factory, test_settings) -> str:
    return await _register_and_login(test_session_factory, test_settings, "alice")


@pytest.fixture
async def bob_token(test_session_factory, test_settings) -> str:
    return await _register_and_login(test_session_factory, test_settings, "bob")


@pytest.fixture
async def alice_listing(client, alice_token) -> dict:
    """A listing created by alice through the API."""
    res = await client.post(
        "/api/posts", json=listing_payload(), headers=auth(alice_token),
    )
    assert res.status_code == 201
    return res.json()
