"""Seed Data — creates the administrator account and a handful of sample events.

Usage:
    python -m ventytime.db.seed

Invariants:
    - Idempotent: an existing admin (by email) is reused, events are only
      inserted when that admin organizes none yet
    - Tables are created if missing (metadata.create_all), so a fresh SQLite
      file is usable without running migrations
"""

import asyncio
import logging
from datetime import timedelta

from sqlalchemy import func, select

from ventytime.config import get_settings
from ventytime.core.domain_types import EventType, UserRole, utcnow
from ventytime.db.base import Base
from ventytime.db.session import create_session_factory
from ventytime.infrastructure.observability import setup_logging
from ventytime.infrastructure.security import hash_password
from ventytime.models import Event, User

logger = logging.getLogger(__name__)

SAMPLE_EVENTS = [
    {
        "title": "Python Async Deep Dive",
        "description": "A hands-on workshop on asyncio, task groups and structured concurrency.",
        "location": "Tech Hub, Room 4",
        "category": "Technology",
        "event_type": EventType.WORKSHOP.value,
        "max_attendees": 30,
        "price": 25.0,
        "tags": ["python", "asyncio"],
        "offset_days": 7,
        "duration_hours": 4,
    },
    {
        "title": "Summer Jazz Night",
        "description": "Live jazz quartet under the open sky. Bring a blanket.",
        "location": "Riverside Park Amphitheatre",
        "category": "Music",
        "event_type": EventType.CONCERT.value,
        "max_attendees": 200,
        "price": 15.0,
        "tags": ["jazz", "outdoor"],
        "offset_days": 14,
        "duration_hours": 3,
    },
    {
        "title": "Founders Breakfast Meetup",
        "description": "Monthly meetup for early-stage founders. Coffee is on us.",
        "location": "Online",
        "is_online": True,
        "online_url": "https://meet.example.com/founders",
        "category": "Business",
        "event_type": EventType.MEETUP.value,
        "max_attendees": 50,
        "price": 0.0,
        "tags": ["startups"],
        "offset_days": 3,
        "duration_hours": 2,
    },
]


async def _ensure_admin(db, settings) -> User:
    email = settings.seed_admin_email.lower()
    admin = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if admin is not None:
        return admin
    admin = User(
        email=email,
        user_name=email,
        password_hash=hash_password(settings.seed_admin_password),
        first_name="Admin",
        last_name="User",
        role=UserRole.ADMIN.value,
    )
    db.add(admin)
    await db.flush()
    logger.info(f"Created admin account {email}")
    return admin


async def seed() -> int:
    """Seed the database. Returns the number of events inserted."""
    settings = get_settings()
    session_factory = create_session_factory(settings.database_url)
    engine = session_factory.kw["bind"]
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with session_factory() as db:
            admin = await _ensure_admin(db, settings)
            existing = await db.scalar(
                select(func.count()).select_from(Event).where(Event.organizer_id == admin.id)
            )
            created = 0
            if not existing:
                now = utcnow()
                for sample in SAMPLE_EVENTS:
                    fields = dict(sample)
                    start = now + timedelta(days=fields.pop("offset_days"))
                    duration = timedelta(hours=fields.pop("duration_hours"))
                    db.add(Event(
                        **fields,
                        start_date=start,
                        end_date=start + duration,
                        organizer_id=admin.id,
                    ))
                    created += 1
            await db.commit()
        logger.info(f"Seed complete: {created} events inserted")
        return created
    finally:
        await engine.dispose()


if __name__ == "__main__":
    _settings = get_settings()
    setup_logging(_settings.log_level, _settings.log_format)
    asyncio.run(seed())
