"""Auth Enforcement — login lockout and password rules.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - A user is locked while lockout_end is in the future
    - After max_attempts consecutive failures the account locks and the counter resets
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from ventytime.core.domain_types import as_utc
from ventytime.core.errors import AuthenticationError, ValidationError

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class LockoutState:
    """Failure counter and lockout deadline after a failed attempt."""
    access_failed_count: int
    lockout_end: datetime | None


def is_locked_out(lockout_end: datetime | None, now: datetime) -> bool:
    return lockout_end is not None and as_utc(lockout_end) > as_utc(now)


def check_can_login(
    is_active: bool, lockout_end: datetime | None, now: datetime,
) -> AuthenticationError | None:
    if not is_active:
        return AuthenticationError(INVALID_CREDENTIALS, "INVALID_CREDENTIALS")
    if is_locked_out(lockout_end, now):
        return AuthenticationError(
            "Account is locked due to repeated failed logins. Try again later.",
            "ACCOUNT_LOCKED",
        )
    return None


def register_failed_attempt(
    access_failed_count: int,
    now: datetime,
    max_attempts: int,
    lockout_minutes: int,
) -> LockoutState:
    """Next lockout state after one more wrong password."""
    failures = access_failed_count + 1
    if failures >= max_attempts:
        return LockoutState(0, as_utc(now) + timedelta(minutes=lockout_minutes))
    return LockoutState(failures, None)


def check_new_password(
    password: str, confirm_password: str,
) -> ValidationError | None:
    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            field="password",
        )
    if password != confirm_password:
        return ValidationError("Passwords do not match", field="confirm_password")
    return None
