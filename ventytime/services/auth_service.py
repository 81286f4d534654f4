"""Auth Service — account registration and password login with lockout.

Invariants:
    - Emails are unique (case-insensitive; stored lower-cased)
    - Unknown, inactive and wrong-password logins share one message: "Invalid email or password"
    - lockout_max_attempts consecutive failures lock the account for lockout_minutes
    - A successful login resets the failure counter and stamps last_login_at

Design Decisions:
    - Lockout arithmetic lives in core/enforce_auth.py; this service only persists it
    - Self-registration is limited to SELF_ASSIGNABLE_ROLES (Admin only via seed or admin API)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.config import Settings
from ventytime.core.domain_types import SELF_ASSIGNABLE_ROLES, utcnow
from ventytime.core.enforce_auth import (
    INVALID_CREDENTIALS, check_can_login, check_new_password, register_failed_attempt,
)
from ventytime.core.errors import AuthenticationError, BusinessRuleError, ValidationError
from ventytime.infrastructure.security import hash_password, verify_password
from ventytime.models.user import User
from ventytime.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from ventytime.services.token_service import TokenService

logger = logging.getLogger(__name__)


async def find_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


class AuthService:

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.tokens = TokenService(settings)

    def _auth_response(self, user: User, message: str) -> AuthResponse:
        token, expires_at = self.tokens.create_token(user)
        return AuthResponse(
            success=True,
            message=message,
            token=token,
            user_id=user.id,
            username=user.user_name,
            email=user.email,
            role=user.role,
            first_name=user.first_name,
            last_name=user.last_name,
            last_login_at=user.last_login_at,
            expires_at=expires_at,
        )

    async def register(self, request: RegisterRequest) -> AuthResponse:
        error = check_new_password(request.password, request.confirm_password)
        if error:
            raise error
        if request.role not in SELF_ASSIGNABLE_ROLES:
            raise ValidationError("Invalid role selected", field="role")
        if await find_user_by_email(self.db, request.email):
            raise BusinessRuleError("Email is already registered", "EMAIL_TAKEN")

        now = utcnow()
        user = User(
            email=request.email.lower(),
            user_name=request.user_name or request.email.lower(),
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            role=request.role.value,
            created_at=now,
            last_login_at=now,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise BusinessRuleError("Email is already registered", "EMAIL_TAKEN")

        logger.info(f"Registered user {user.email}", extra={"user_id": user.id})
        return self._auth_response(user, "Registration successful")

    async def login(self, request: LoginRequest) -> AuthResponse:
        user = await find_user_by_email(self.db, request.email)
        if user is None:
            raise AuthenticationError(INVALID_CREDENTIALS, "INVALID_CREDENTIALS")

        now = utcnow()
        error = check_can_login(user.is_active, user.lockout_end, now)
        if error:
            logger.warning(
                f"Login refused: {error.code}",
                extra={"user_id": user.id, "error_code": error.code},
            )
            raise error

        if not verify_password(request.password, user.password_hash):
            state = register_failed_attempt(
                user.access_failed_count,
                now,
                self.settings.lockout_max_attempts,
                self.settings.lockout_minutes,
            )
            user.access_failed_count = state.access_failed_count
            user.lockout_end = state.lockout_end
            await self.db.commit()
            if state.lockout_end is not None:
                logger.warning(
                    "Account locked after repeated failed logins",
                    extra={"user_id": user.id},
                )
            raise AuthenticationError(INVALID_CREDENTIALS, "INVALID_CREDENTIALS")

        user.access_failed_count = 0
        user.lockout_end = None
        user.last_login_at = now
        await self.db.commit()
        logger.info("User logged in", extra={"user_id": user.id})
        return self._auth_response(user, "Login successful")
