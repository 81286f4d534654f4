"""Entity Protocols — structural contracts for objects passed into pure rules.

Invariants:
    - Core NEVER imports ORM models; rules accept anything with these attributes
    - Protocols describe read-only attributes only

Design Decisions:
    - Protocol over ABC: ORM models and test doubles satisfy them structurally
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID


class ActorLike(Protocol):
    """The authenticated caller."""
    id: UUID
    role: str
    is_active: bool


class EventLike(Protocol):
    id: int
    organizer_id: UUID
    max_attendees: int
    is_active: bool
    is_cancelled: bool
    start_date: datetime
    end_date: datetime


class RegistrationLike(Protocol):
    id: int
    event_id: int
    user_id: UUID
    status: str


class CommentLike(Protocol):
    id: int
    event_id: int
    user_id: UUID
    is_deleted: bool
