import os
import tempfile
from datetime import datetime, timezone

# Settings and the engine are built at import time, point them at a scratch db
_DB_DIR = tempfile.mkdtemp(prefix="fintrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient

from fintrack.main import app
from fintrack.core.auth import User
from fintrack.core.database import AsyncSessionLocal, Base, engine
from fintrack.api.deps import get_current_user, get_optional_current_user
from fintrack.utils.bucketing import to_timestamp


def ts(value: str) -> int:
    """'2024-01-01T10:00' (UTC) -> ms since epoch."""
    return to_timestamp(datetime.fromisoformat(value).replace(tzinfo=timezone.utc))


@pytest.fixture
async def db_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


async def _make_user(email: str) -> User:
    async with AsyncSessionLocal() as session:
        user = User(email=email, hashed_password="not-a-real-hash", is_active=True)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest.fixture
async def user(db_tables):
    return await _make_user("alice@example.com")


@pytest.fixture
async def other_user(db_tables):
    return await _make_user("bob@example.com")


@pytest.fixture
def login_as():
    """Switch the signed-in user for subsequent requests (None = signed out)."""
    def _login(account):
        if account is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = lambda: account
        app.dependency_overrides[get_optional_current_user] = lambda: account
    yield _login
    app.dependency_overrides.clear()


@pytest.fixture
async def client(user, login_as):
    login_as(user)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
