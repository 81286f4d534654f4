"""Registration Enforcement — capacity and lifecycle rules for event registration.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a VentyTimeError on violation, None on success
    - current_participants counts every registration that is not Cancelled
    - An event is full when current_participants >= max_attendees
    - validate_new_registration chains all checks — first error wins
"""

from datetime import datetime

from ventytime.core.domain_types import RegistrationStatus, as_utc
from ventytime.core.entity_protocols import EventLike, RegistrationLike
from ventytime.core.errors import BusinessRuleError


def is_event_full(event: EventLike, current_participants: int) -> bool:
    return current_participants >= event.max_attendees


def check_event_open(event: EventLike) -> BusinessRuleError | None:
    """Cancelled or deactivated events take no registrations."""
    if event.is_cancelled:
        return BusinessRuleError("Event has been cancelled", "EVENT_CANCELLED")
    if not event.is_active:
        return BusinessRuleError("Event is not active", "EVENT_INACTIVE")
    return None


def check_event_not_ended(event: EventLike, now: datetime) -> BusinessRuleError | None:
    if as_utc(event.end_date) < as_utc(now):
        return BusinessRuleError("Event has already ended", "EVENT_ENDED")
    return None


def check_capacity(
    event: EventLike, current_participants: int,
) -> BusinessRuleError | None:
    if is_event_full(event, current_participants):
        return BusinessRuleError("Event is full", "EVENT_FULL")
    return None


def check_not_registered(
    existing: RegistrationLike | None,
) -> BusinessRuleError | None:
    """A live registration blocks a second one; a cancelled one may be reactivated."""
    if existing is not None and existing.status != RegistrationStatus.CANCELLED:
        return BusinessRuleError(
            "You are already registered for this event", "ALREADY_REGISTERED",
        )
    return None


def validate_new_registration(
    event: EventLike,
    current_participants: int,
    existing: RegistrationLike | None,
    now: datetime,
) -> BusinessRuleError | None:
    """Chain all registration checks. Returns first error or None."""
    return (
        check_event_open(event)
        or check_event_not_ended(event, now)
        or check_not_registered(existing)
        or check_capacity(event, current_participants)
    )


def check_can_cancel(registration: RegistrationLike) -> BusinessRuleError | None:
    if registration.status == RegistrationStatus.CANCELLED:
        return BusinessRuleError(
            "Registration is already cancelled", "ALREADY_CANCELLED",
        )
    return None


def check_can_confirm(
    registration: RegistrationLike, event: EventLike, confirmed_count: int,
) -> BusinessRuleError | None:
    """Only Pending registrations are confirmed, and never beyond capacity."""
    if registration.status != RegistrationStatus.PENDING:
        return BusinessRuleError(
            "Registration cannot be confirmed", "INVALID_REGISTRATION_STATE",
        )
    if confirmed_count >= event.max_attendees:
        return BusinessRuleError("Event is full", "EVENT_FULL")
    return None
