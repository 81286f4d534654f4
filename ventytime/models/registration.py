"""Registration ORM — join row between a user and an event.

Invariants:
    - (event_id, user_id) is unique: one registration row per user per event
    - status is one of RegistrationStatus values; new rows start Pending
    - A cancelled row is reactivated instead of inserting a second one
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ventytime.core.domain_types import RegistrationStatus
from ventytime.db.base import Base


class Registration(Base):
    """UserEventRegistration entity."""
    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_registrations_event_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RegistrationStatus.PENDING.value,
    )
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    event: Mapped["Event"] = relationship("Event", lazy="selectin")
    user: Mapped["User"] = relationship("User", lazy="selectin")
