"""Access Enforcement — ownership and role checks for every protected write.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a VentyTimeError on violation, None on success
    - Admin passes every ownership check

Design Decisions:
    - Same return-or-None shape as the other enforce_* modules, so checks chain with `or`
"""

from collections.abc import Iterable

from ventytime.core.domain_types import UserRole
from ventytime.core.entity_protocols import (
    ActorLike, CommentLike, EventLike, RegistrationLike,
)
from ventytime.core.errors import PermissionDeniedError


def is_admin(actor: ActorLike) -> bool:
    return actor.role == UserRole.ADMIN


def check_role(
    actor: ActorLike, allowed: Iterable[UserRole], action: str,
) -> PermissionDeniedError | None:
    """Caller's role must be one of `allowed`."""
    allowed_values = {UserRole(r).value for r in allowed}
    if actor.role not in allowed_values:
        return PermissionDeniedError(
            f"Role '{actor.role}' is not allowed to {action}. "
            f"Required: {', '.join(sorted(allowed_values))}",
        )
    return None


def check_event_manager(
    actor: ActorLike, event: EventLike, action: str,
) -> PermissionDeniedError | None:
    """Only the event's organizer or an Admin may manage it."""
    if is_admin(actor) or event.organizer_id == actor.id:
        return None
    return PermissionDeniedError(
        f"User is not authorized to {action} this event",
    )


def check_comment_author(
    actor: ActorLike, comment: CommentLike, action: str,
) -> PermissionDeniedError | None:
    """Only the comment's author or an Admin may change it."""
    if is_admin(actor) or comment.user_id == actor.id:
        return None
    return PermissionDeniedError(
        f"User is not authorized to {action} this comment",
    )


def check_registration_viewer(
    actor: ActorLike, registration: RegistrationLike, event: EventLike,
) -> PermissionDeniedError | None:
    """Registrant, event organizer or Admin may read a registration."""
    if registration.user_id == actor.id:
        return None
    return check_event_manager(actor, event, "view registrations of")


def check_registrant(
    actor: ActorLike, registration: RegistrationLike, action: str,
) -> PermissionDeniedError | None:
    """Only the registrant may act on their own registration."""
    if registration.user_id != actor.id:
        return PermissionDeniedError(
            f"User is not authorized to {action} this registration",
        )
    return None
