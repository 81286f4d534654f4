"""DTO Mappers — ORM rows to wire schemas.

Invariants:
    - Every datetime leaving the service layer is aware UTC
    - Derived event flags are computed against a single `now`
"""

from datetime import datetime

from ventytime.core.domain_types import as_utc, utcnow
from ventytime.core.enforce_registration import is_event_full
from ventytime.models.comment import EventComment
from ventytime.models.event import Event
from ventytime.models.registration import Registration
from ventytime.schemas.comment import CommentDto
from ventytime.schemas.event import EventDto
from ventytime.schemas.registration import RegistrationDto


def _utc_or_none(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


def event_to_dto(
    event: Event, current_participants: int, now: datetime | None = None,
) -> EventDto:
    now = as_utc(now or utcnow())
    start = as_utc(event.start_date)
    end = as_utc(event.end_date)
    has_ended = end < now
    full = is_event_full(event, current_participants)
    organizer = event.organizer
    return EventDto(
        id=event.id,
        title=event.title,
        description=event.description,
        location=event.location,
        venue_details=event.venue_details,
        online_url=event.online_url,
        is_online=event.is_online,
        start_date=start,
        end_date=end,
        category=event.category,
        event_type=event.event_type,
        accessibility=event.accessibility,
        image_url=event.image_url,
        price=float(event.price or 0),
        max_attendees=event.max_attendees,
        is_active=event.is_active,
        is_cancelled=event.is_cancelled,
        is_featured=event.is_featured,
        requires_registration=event.requires_registration,
        has_age_restriction=event.has_age_restriction,
        minimum_age=event.minimum_age,
        has_early_bird_price=event.has_early_bird_price,
        early_bird_price=event.early_bird_price,
        early_bird_deadline=_utc_or_none(event.early_bird_deadline),
        refund_policy=event.refund_policy,
        requirements=event.requirements,
        schedule=event.schedule,
        tags=list(event.tags or []),
        allow_waitlist=event.allow_waitlist,
        waitlist_capacity=event.waitlist_capacity,
        organizer_id=event.organizer_id,
        organizer_name=(organizer.full_name or organizer.user_name) if organizer else "",
        created_at=as_utc(event.created_at),
        updated_at=_utc_or_none(event.updated_at),
        current_participants=current_participants,
        has_started=start <= now,
        has_ended=has_ended,
        is_full=full,
        is_registration_open=(
            event.is_active and not event.is_cancelled and not has_ended and not full
        ),
    )


def registration_to_dto(registration: Registration) -> RegistrationDto:
    event = registration.event
    user = registration.user
    return RegistrationDto(
        id=registration.id,
        event_id=registration.event_id,
        user_id=registration.user_id,
        status=registration.status,
        registered_at=as_utc(registration.registered_at),
        updated_at=_utc_or_none(registration.updated_at),
        event_title=event.title,
        event_start_date=as_utc(event.start_date),
        user_name=user.full_name or user.user_name,
        user_email=user.email,
    )


def comment_to_dto(comment: EventComment) -> CommentDto:
    user = comment.user
    return CommentDto(
        id=comment.id,
        event_id=comment.event_id,
        user_id=comment.user_id,
        user_name=user.full_name or user.user_name,
        user_avatar_url=user.avatar_url,
        content=comment.content,
        created_at=as_utc(comment.created_at),
        updated_at=_utc_or_none(comment.updated_at),
        is_edited=comment.is_edited,
    )


def with_current_flags(dto: EventDto, now: datetime | None = None) -> EventDto:
    """Recompute the clock-dependent flags of an EventDto served from cache."""
    now = as_utc(now or utcnow())
    has_ended = dto.end_date < now
    return dto.model_copy(update={
        "has_started": dto.start_date <= now,
        "has_ended": has_ended,
        "is_registration_open": (
            dto.is_active and not dto.is_cancelled and not has_ended and not dto.is_full
        ),
    })
