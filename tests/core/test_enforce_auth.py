"""Auth Enforcement — tests for lockout arithmetic and password rules."""

from datetime import datetime, timedelta, timezone

from ventytime.core.enforce_auth import (
    INVALID_CREDENTIALS,
    check_can_login,
    check_new_password,
    is_locked_out,
    register_failed_attempt,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_failures_below_threshold_only_count():
    state = register_failed_attempt(3, NOW, max_attempts=5, lockout_minutes=15)
    assert state.access_failed_count == 4
    assert state.lockout_end is None


def test_fifth_failure_locks_for_fifteen_minutes():
    state = register_failed_attempt(4, NOW, max_attempts=5, lockout_minutes=15)
    assert state.access_failed_count == 0
    assert state.lockout_end == NOW + timedelta(minutes=15)


def test_lockout_expires():
    lockout_end = NOW + timedelta(minutes=15)
    assert is_locked_out(lockout_end, NOW)
    assert not is_locked_out(lockout_end, NOW + timedelta(minutes=15))


def test_naive_lockout_end_treated_as_utc():
    assert is_locked_out(datetime(2026, 5, 1, 12, 5), NOW)


def test_locked_account_cannot_login():
    error = check_can_login(True, NOW + timedelta(minutes=1), NOW)
    assert error.code == "ACCOUNT_LOCKED"
    assert error.http_status == 401


def test_inactive_account_gets_generic_message():
    error = check_can_login(False, None, NOW)
    assert error.message == INVALID_CREDENTIALS


def test_password_rules():
    assert check_new_password("short", "short").field == "password"
    assert check_new_password("Password1!", "Password2!").message == "Passwords do not match"
    assert check_new_password("Password1!", "Password1!") is None
