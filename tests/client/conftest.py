"""Client SDK fixtures — the real app behind httpx's ASGI transport.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The SDK talks to the app in-process; no sockets are opened
"""

import pytest
from httpx import ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from ventytime.client import VentyTimeClient
from ventytime.core.domain_types import UserRole
from ventytime.db.base import Base
from ventytime.infrastructure.cache import get_event_cache
from ventytime.infrastructure.database import get_db
from ventytime.infrastructure.security import hash_password
from ventytime.main import app
from ventytime.models.user import User


@pytest.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def sdk(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    get_event_cache().clear()

    async with VentyTimeClient(
        "http://test", transport=ASGITransport(app=app),
    ) as client:
        yield client

    app.dependency_overrides.clear()
    get_event_cache().clear()


@pytest.fixture
async def admin_account(session_factory):
    async with session_factory() as db:
        admin = User(
            email="admin@example.com",
            user_name="admin@example.com",
            password_hash=hash_password("Admin123!"),
            first_name="Ada",
            last_name="Admin",
            role=UserRole.ADMIN.value,
        )
        db.add(admin)
        await db.commit()
        return admin
