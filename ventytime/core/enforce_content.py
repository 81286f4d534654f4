"""Content Enforcement — field rules for events and comments.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a VentyTimeError on violation, None on success
    - Comment content is measured after trimming whitespace
"""

from datetime import datetime

from ventytime.core.domain_types import as_utc
from ventytime.core.entity_protocols import EventLike
from ventytime.core.errors import BusinessRuleError, ValidationError

MAX_COMMENT_LENGTH = 1000
REQUIRED_EVENT_FIELDS = ("title", "description", "location", "category")


def check_required_fields(fields: dict[str, str | None]) -> ValidationError | None:
    """Every listed field must be present and non-blank."""
    for name, value in fields.items():
        if value is None or not str(value).strip():
            return ValidationError(f"{name} is required", field=name)
    return None


def check_schedule(
    start_date: datetime, end_date: datetime,
) -> ValidationError | None:
    if as_utc(end_date) < as_utc(start_date):
        return ValidationError(
            "End date must be on or after the start date", field="end_date",
        )
    return None


def check_starts_in_future(
    start_date: datetime, now: datetime,
) -> ValidationError | None:
    if as_utc(start_date) <= as_utc(now):
        return ValidationError(
            "Event date must be in the future", field="start_date",
        )
    return None


def check_online_fields(
    is_online: bool, online_url: str | None,
) -> ValidationError | None:
    if is_online and not (online_url and online_url.strip()):
        return ValidationError(
            "Online events require an online URL", field="online_url",
        )
    return None


def check_early_bird(
    has_early_bird_price: bool,
    early_bird_price: float | None,
    price: float,
) -> ValidationError | None:
    if not has_early_bird_price:
        return None
    if early_bird_price is None or early_bird_price > price:
        return ValidationError(
            "Early bird price must be set and not exceed the regular price",
            field="early_bird_price",
        )
    return None


def check_no_null_fields(
    changes: dict, nullable: frozenset[str],
) -> ValidationError | None:
    """Explicit nulls are only accepted for optional fields."""
    for name, value in changes.items():
        if value is None and name not in nullable:
            return ValidationError(f"{name} cannot be null", field=name)
    return None


def validate_event_fields(
    fields: dict,
    now: datetime,
    require_future_start: bool,
) -> ValidationError | None:
    """Chain all event field checks. `fields` holds the final (merged) values."""
    return (
        check_required_fields({k: fields.get(k) for k in REQUIRED_EVENT_FIELDS})
        or check_schedule(fields["start_date"], fields["end_date"])
        or (
            check_starts_in_future(fields["start_date"], now)
            if require_future_start else None
        )
        or check_online_fields(
            fields.get("is_online", False), fields.get("online_url"),
        )
        or check_early_bird(
            fields.get("has_early_bird_price", False),
            fields.get("early_bird_price"),
            fields.get("price", 0),
        )
    )


def normalize_comment_content(content: str | None) -> str:
    return (content or "").strip()


def check_comment_content(content: str) -> ValidationError | None:
    """Content (already trimmed) must be 1..1000 characters."""
    if not content:
        return ValidationError("Comment content cannot be empty", field="content")
    if len(content) > MAX_COMMENT_LENGTH:
        return ValidationError(
            f"Comment content cannot exceed {MAX_COMMENT_LENGTH} characters",
            field="content",
        )
    return None


def check_event_accepts_comments(
    event: EventLike, action: str,
) -> BusinessRuleError | None:
    """`action` reads as "comment on", "update comments on" or "delete comments on"."""
    if not event.is_active or event.is_cancelled:
        return BusinessRuleError(
            f"Cannot {action} inactive events", "EVENT_INACTIVE",
        )
    return None
