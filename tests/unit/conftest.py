"""
Unit test conftest - in-memory database, fake cache and an HTTP client for the app.
"""

import os

os.environ.setdefault("SQLALCHEMY", "sqlite+aiosqlite://")
os.environ.setdefault("BRANDING_FILE", "")

import secrets  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import idp_console.database.orms  # noqa: E402,F401
from idp_console.config import settings  # noqa: E402
from idp_console.database import Base, get_db_session, utcnow  # noqa: E402
from idp_console.permissions import Permissioning  # noqa: E402
from idp_console.user.schemas import User, UserSession  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the fail-open redis wrapper."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value.encode() if isinstance(value, str) else value
        return True

    async def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def close(self):
        pass


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(settings, "redis_client", fake)
    return fake


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    from idp_console.main import create_app

    app = create_app()

    async def _get_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_db_session
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


async def create_user(db, username, role=None):
    """Create a user with an active session, returning (user, raw session token)."""
    user = User(username=username, email=f"{username}@acme.io", permissions_bitmask=0)
    if role is not None:
        Permissioning.enable(user, role)
    db.add(user)
    await db.flush()
    token = secrets.token_urlsafe(24)
    db.add(
        UserSession(
            token_hash=UserSession.hash_token(token),
            user_id=user.user_id,
            expires_at=utcnow() + timedelta(hours=1),
        )
    )
    await db.commit()
    return user, token


@pytest_asyncio.fixture
async def admin(db):
    return await create_user(db, "admin", Permissioning.admin)


@pytest_asyncio.fixture
async def end_user(db):
    return await create_user(db, "alice")


@pytest.fixture
def admin_headers(admin):
    _, token = admin
    return {"Authorization": f"Bearer {token}"}
