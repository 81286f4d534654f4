"""Event ORM — a scheduled, capacity-limited gathering owned by an organizer.

Invariants:
    - organizer_id references users.id (RESTRICT: organizers with events cannot be deleted)
    - max_attendees >= 1; price >= 0 (validated at the schema boundary)
    - tags stored as a JSON list of strings
    - is_cancelled is terminal; is_active toggles visibility

Design Decisions:
    - No registrations/comments collections: counts and lists are explicit queries,
      and deletes of dependants are explicit statements in EventService
    - organizer loaded with selectin: every EventDto carries organizer_name
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, DateTime, ForeignKey, Integer, JSON, Numeric, String, Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ventytime.core.domain_types import EventAccessibility, EventType
from ventytime.db.base import Base


class Event(Base):
    """Event aggregate."""
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    venue_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    online_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EventType.OTHER.value,
    )
    accessibility: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EventAccessibility.PUBLIC.value,
    )
    image_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0,
    )
    max_attendees: Mapped[int] = mapped_column(Integer, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    requires_registration: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    has_age_restriction: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    minimum_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    has_early_bird_price: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    early_bird_price: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True,
    )
    early_bird_deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    refund_policy: Mapped[str | None] = mapped_column(Text, nullable=True)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    schedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    allow_waitlist: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    waitlist_capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    organizer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    organizer: Mapped["User"] = relationship("User", lazy="selectin")
