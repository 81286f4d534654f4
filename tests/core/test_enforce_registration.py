"""Registration Enforcement — tests for pure capacity and lifecycle rules.

Tests cover:
    - is_event_full at, below and above capacity
    - validate_new_registration check order (open → not ended → not registered → capacity)
    - A cancelled registration does not block re-registration
    - check_can_cancel / check_can_confirm state rules
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

from ventytime.core.enforce_registration import (
    check_can_cancel,
    check_can_confirm,
    check_capacity,
    check_event_not_ended,
    is_event_full,
    validate_new_registration,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def _event(**overrides):
    fields = dict(
        id=1,
        organizer_id=uuid4(),
        max_attendees=2,
        is_active=True,
        is_cancelled=False,
        start_date=NOW + timedelta(days=1),
        end_date=NOW + timedelta(days=1, hours=2),
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _registration(status="Pending"):
    return SimpleNamespace(id=10, event_id=1, user_id=uuid4(), status=status)


# ─── is_event_full ───────────────────────────────────────────────

def test_event_not_full_below_capacity():
    assert is_event_full(_event(max_attendees=2), 1) is False


def test_event_full_at_capacity():
    assert is_event_full(_event(max_attendees=2), 2) is True


def test_check_capacity_reports_event_full():
    error = check_capacity(_event(max_attendees=1), 1)
    assert error.code == "EVENT_FULL"
    assert error.http_status == 400


# ─── validate_new_registration ───────────────────────────────────

def test_valid_registration_passes():
    assert validate_new_registration(_event(), 0, None, NOW) is None


def test_cancelled_event_rejected_first():
    error = validate_new_registration(
        _event(is_cancelled=True, end_date=NOW - timedelta(days=1)), 5, _registration(), NOW,
    )
    assert error.code == "EVENT_CANCELLED"


def test_inactive_event_rejected():
    error = validate_new_registration(_event(is_active=False), 0, None, NOW)
    assert error.code == "EVENT_INACTIVE"


def test_ended_event_rejected():
    error = validate_new_registration(
        _event(start_date=NOW - timedelta(hours=3), end_date=NOW - timedelta(hours=1)),
        0, None, NOW,
    )
    assert error.code == "EVENT_ENDED"
    assert error.message == "Event has already ended"


def test_event_in_progress_still_accepts_registrations():
    event = _event(start_date=NOW - timedelta(hours=1), end_date=NOW + timedelta(hours=1))
    assert check_event_not_ended(event, NOW) is None


def test_duplicate_registration_rejected_before_capacity():
    error = validate_new_registration(_event(max_attendees=1), 1, _registration("Confirmed"), NOW)
    assert error.code == "ALREADY_REGISTERED"


def test_cancelled_registration_does_not_block():
    assert validate_new_registration(_event(), 0, _registration("Cancelled"), NOW) is None


def test_full_event_rejected():
    error = validate_new_registration(_event(max_attendees=2), 2, None, NOW)
    assert error.code == "EVENT_FULL"
    assert error.message == "Event is full"


# ─── cancel / confirm ────────────────────────────────────────────

def test_cancel_pending_allowed():
    assert check_can_cancel(_registration("Pending")) is None


def test_cancel_twice_rejected():
    assert check_can_cancel(_registration("Cancelled")).code == "ALREADY_CANCELLED"


def test_confirm_pending_below_capacity():
    assert check_can_confirm(_registration("Pending"), _event(max_attendees=2), 1) is None


def test_confirm_rejects_non_pending():
    error = check_can_confirm(_registration("Confirmed"), _event(), 0)
    assert error.code == "INVALID_REGISTRATION_STATE"


def test_confirm_rejects_when_confirmed_seats_exhausted():
    error = check_can_confirm(_registration("Pending"), _event(max_attendees=2), 2)
    assert error.code == "EVENT_FULL"
