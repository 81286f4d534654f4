"""Event Schemas — create/update payloads, the EventDto read model and paging.

Invariants:
    - Incoming datetimes are normalized to aware UTC
    - EventCreate bounds: title 1..100, max_attendees 1..10000, price >= 0
    - EventUpdate fields are all optional; only the fields sent are applied
    - Cross-field rules (schedule, future start, online URL) live in core/enforce_content.py

Design Decisions:
    - EventDto is built by EventService (needs the participant count), not from_attributes
    - Tags are trimmed and de-duplicated in order
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ventytime.core.domain_types import (
    EventAccessibility, EventType, NotificationType, as_utc,
)

MAX_PAGE_SIZE = 100


def _normalize_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class EventCreate(BaseModel):
    title: str = Field(max_length=100)
    description: str
    location: str = Field(max_length=300)
    category: str = Field(max_length=50)
    start_date: datetime
    end_date: datetime
    max_attendees: int = Field(ge=1, le=10_000)
    price: float = Field(0, ge=0)
    venue_details: str | None = None
    online_url: str | None = Field(None, max_length=2000)
    is_online: bool = False
    event_type: EventType = EventType.OTHER
    accessibility: EventAccessibility = EventAccessibility.PUBLIC
    image_url: str | None = Field(None, max_length=2000)
    is_featured: bool = False
    requires_registration: bool = True
    has_age_restriction: bool = False
    minimum_age: int | None = Field(None, ge=0, le=120)
    has_early_bird_price: bool = False
    early_bird_price: float | None = Field(None, ge=0)
    early_bird_deadline: datetime | None = None
    refund_policy: str | None = None
    requirements: str | None = None
    schedule: str | None = None
    tags: list[str] = Field(default_factory=list)
    allow_waitlist: bool = False
    waitlist_capacity: int | None = Field(None, ge=0)

    @field_validator("start_date", "end_date", "early_bird_deadline")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _normalize_tags(v) or []


class EventUpdate(BaseModel):
    title: str | None = Field(None, max_length=100)
    description: str | None = None
    location: str | None = Field(None, max_length=300)
    category: str | None = Field(None, max_length=50)
    start_date: datetime | None = None
    end_date: datetime | None = None
    max_attendees: int | None = Field(None, ge=1, le=10_000)
    price: float | None = Field(None, ge=0)
    venue_details: str | None = None
    online_url: str | None = Field(None, max_length=2000)
    is_online: bool | None = None
    event_type: EventType | None = None
    accessibility: EventAccessibility | None = None
    image_url: str | None = Field(None, max_length=2000)
    is_active: bool | None = None
    is_featured: bool | None = None
    requires_registration: bool | None = None
    has_age_restriction: bool | None = None
    minimum_age: int | None = Field(None, ge=0, le=120)
    has_early_bird_price: bool | None = None
    early_bird_price: float | None = Field(None, ge=0)
    early_bird_deadline: datetime | None = None
    refund_policy: str | None = None
    requirements: str | None = None
    schedule: str | None = None
    tags: list[str] | None = None
    allow_waitlist: bool | None = None
    waitlist_capacity: int | None = Field(None, ge=0)

    @field_validator("start_date", "end_date", "early_bird_deadline")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_tags(v)


class EventDto(BaseModel):
    """Read model for an event, enriched with organizer and participation data."""
    id: int
    title: str
    description: str
    location: str
    venue_details: str | None = None
    online_url: str | None = None
    is_online: bool
    start_date: datetime
    end_date: datetime
    category: str
    event_type: EventType
    accessibility: EventAccessibility
    image_url: str | None = None
    price: float
    max_attendees: int
    is_active: bool
    is_cancelled: bool
    is_featured: bool
    requires_registration: bool
    has_age_restriction: bool
    minimum_age: int | None = None
    has_early_bird_price: bool
    early_bird_price: float | None = None
    early_bird_deadline: datetime | None = None
    refund_policy: str | None = None
    requirements: str | None = None
    schedule: str | None = None
    tags: list[str]
    allow_waitlist: bool
    waitlist_capacity: int | None = None
    organizer_id: UUID
    organizer_name: str
    created_at: datetime
    updated_at: datetime | None = None

    current_participants: int
    has_started: bool
    has_ended: bool
    is_full: bool
    is_registration_open: bool


class EventsPage(BaseModel):
    items: list[EventDto]
    total_count: int
    page: int
    page_size: int


class IsFullResponse(BaseModel):
    event_id: int
    is_full: bool
    current_participants: int
    max_attendees: int


class NotifyParticipantsRequest(BaseModel):
    """Custom message an organizer sends to one or all participants."""
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1, max_length=2000)
    type: NotificationType = NotificationType.CUSTOM_MESSAGE
    link: str | None = Field(None, max_length=500)


class NotifyResult(BaseModel):
    notified: int
