"""User ORM — account identity, profile, role, lockout state and notification flags.

Invariants:
    - id is UUID primary key
    - email is unique and stored lower-cased
    - role is one of UserRole values (single role per account)
    - password_hash is never serialized to the wire

Design Decisions:
    - Lockout counters live on the user row (access_failed_count, lockout_end)
    - Notification flags denormalized onto the user: one row read per push decision
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from ventytime.core.domain_types import UserRole
from ventytime.db.base import Base

DEFAULT_AVATAR_URL = "/images/default-profile.png"


class User(Base):
    """Application user."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(256), nullable=False, unique=True, index=True,
    )
    user_name: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.USER.value,
    )

    # Profile
    avatar_url: Mapped[str] = mapped_column(
        String(2000), nullable=False, default=DEFAULT_AVATAR_URL,
    )
    bio: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    website: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Account state
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    access_failed_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    lockout_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    # Notification settings
    email_notifications: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    push_notifications: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    event_reminders: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    new_comment_notifications: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
