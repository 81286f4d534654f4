"""Service test fixtures — async DB, FastAPI test client and seeded accounts.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched for code that opens sessions itself (the WebSocket hub)
    - The event cache starts empty for every test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific behaviour such as FK cascades is not relied upon)
    - Users and events are inserted directly; tokens are minted with TokenService
      so tests do not pay for a login round-trip each time
"""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import ventytime.infrastructure.database as db_module
from ventytime.config import get_settings
from ventytime.core.domain_types import UserRole, utcnow
from ventytime.db.base import Base
from ventytime.infrastructure.cache import get_event_cache
from ventytime.infrastructure.database import get_db, DatabaseSessionManager
from ventytime.infrastructure.security import hash_password
from ventytime.main import app
from ventytime.models.event import Event
from ventytime.models.user import User
from ventytime.services.token_service import TokenService

DEFAULT_PASSWORD = "Password1!"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
def fake_db_manager(test_engine, test_session_factory):
    """Point db_module.db_manager at the test database."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    yield fake_manager
    db_module.db_manager = original_manager


@pytest.fixture(autouse=True)
def clear_event_cache():
    get_event_cache().clear()
    yield
    get_event_cache().clear()


@pytest.fixture
async def client(test_session_factory, fake_db_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


# ─── Accounts ────────────────────────────────────────────────────

@pytest.fixture
def make_user(test_db):
    counter = {"n": 0}

    async def _make(
        role: UserRole = UserRole.USER,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        **fields,
    ) -> User:
        counter["n"] += 1
        email = email or f"{role.value.lower()}{counter['n']}@example.com"
        user = User(
            email=email,
            user_name=email,
            password_hash=hash_password(password),
            first_name=fields.pop("first_name", role.value),
            last_name=fields.pop("last_name", f"Tester{counter['n']}"),
            role=role.value,
            **fields,
        )
        test_db.add(user)
        await test_db.commit()
        return user

    return _make


def token_for(user: User) -> str:
    token, _ = TokenService(get_settings()).create_token(user)
    return token


@pytest.fixture
def auth_headers():
    """auth_headers(user) -> Authorization header dict."""
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {token_for(user)}"}
    return _headers


@pytest.fixture
async def attendee(make_user):
    return await make_user(UserRole.USER)


@pytest.fixture
async def organizer(make_user):
    return await make_user(UserRole.ORGANIZER)


@pytest.fixture
async def admin(make_user):
    return await make_user(UserRole.ADMIN)


# ─── Events ──────────────────────────────────────────────────────

@pytest.fixture
def event_payload():
    """event_payload(**overrides) -> JSON body for POST /api/events that passes every rule."""
    def _payload(**overrides) -> dict:
        start = utcnow() + timedelta(days=7)
        body = {
            "title": "Python Meetup",
            "description": "Talks and pizza",
            "location": "Lisbon",
            "category": "Technology",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(hours=3)).isoformat(),
            "max_attendees": 50,
            "price": 10.0,
        }
        body.update(overrides)
        return body
    return _payload


@pytest.fixture
def make_event(test_db):

    async def _make(organizer: User, **fields) -> Event:
        start = fields.pop("start_date", utcnow() + timedelta(days=7))
        event = Event(
            title=fields.pop("title", "Python Meetup"),
            description=fields.pop("description", "Talks and pizza"),
            location=fields.pop("location", "Lisbon"),
            category=fields.pop("category", "Technology"),
            start_date=start,
            end_date=fields.pop("end_date", start + timedelta(hours=3)),
            max_attendees=fields.pop("max_attendees", 50),
            organizer_id=organizer.id,
            tags=fields.pop("tags", []),
            **fields,
        )
        test_db.add(event)
        await test_db.commit()
        return event

    return _make


@pytest.fixture
def small_upload_limit():
    """Shrink max_upload_bytes to 1 KiB for the routes under test."""
    settings = get_settings().model_copy(update={"max_upload_bytes": 1024})
    app.dependency_overrides[get_settings] = lambda: settings
    yield settings
    app.dependency_overrides.pop(get_settings, None)
