"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - Enum values are the exact strings persisted in the DB and sent on the wire

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from datetime import datetime, timezone
from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles. Exactly one role per user."""
    USER = "User"
    ORGANIZER = "Organizer"
    ADMIN = "Admin"


SELF_ASSIGNABLE_ROLES = frozenset({UserRole.USER, UserRole.ORGANIZER})
EVENT_MANAGER_ROLES = frozenset({UserRole.ORGANIZER, UserRole.ADMIN})


class RegistrationStatus(str, Enum):
    """Registration lifecycle: Pending -> Confirmed | Cancelled."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class NotificationType(str, Enum):
    """Kinds of user notifications."""
    INFO = "Info"
    SUCCESS = "Success"
    WARNING = "Warning"
    ERROR = "Error"
    EVENT_UPDATE = "EventUpdate"
    CUSTOM_MESSAGE = "CustomMessage"


class EventType(str, Enum):
    """Format of an event."""
    CONFERENCE = "Conference"
    WORKSHOP = "Workshop"
    MEETUP = "Meetup"
    CONCERT = "Concert"
    EXHIBITION = "Exhibition"
    SPORTS = "Sports"
    OTHER = "Other"


class EventAccessibility(str, Enum):
    """Who may see and register for an event."""
    PUBLIC = "Public"
    PRIVATE = "Private"
    INVITE_ONLY = "InviteOnly"


EVENT_CATEGORIES: tuple[str, ...] = (
    "Technology",
    "Music",
    "Sports",
    "Food & Drink",
    "Arts & Culture",
    "Business",
    "Education",
    "Entertainment",
    "Health & Wellness",
    "Charity",
    "Fashion",
    "Lifestyle",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
