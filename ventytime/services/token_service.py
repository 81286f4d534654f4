"""Token Service — issues and validates the JWT bearer tokens for users.

Invariants:
    - Tokens carry sub (user id), email, name, given_name, family_name, role
    - Lifetime is jwt_expiration_minutes from Settings
    - validate() returns claims or raises AuthenticationError (never returns None)
"""

from datetime import datetime, timedelta
from uuid import UUID

from ventytime.config import Settings
from ventytime.core.domain_types import utcnow
from ventytime.core.errors import AuthenticationError
from ventytime.infrastructure.security import decode_token, encode_token
from ventytime.models.user import User


class TokenService:

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def lifetime(self) -> timedelta:
        return timedelta(minutes=self.settings.jwt_expiration_minutes)

    def create_token(self, user: User, now: datetime | None = None) -> tuple[str, datetime]:
        """Return (token, expires_at)."""
        issued_at = now or utcnow()
        token = encode_token(
            {
                "sub": str(user.id),
                "email": user.email,
                "name": user.user_name,
                "given_name": user.first_name,
                "family_name": user.last_name,
                "role": user.role,
            },
            secret=self.settings.jwt_secret,
            issuer=self.settings.jwt_issuer,
            audience=self.settings.jwt_audience,
            expires_in=self.lifetime,
            algorithm=self.settings.jwt_algorithm,
            now=issued_at,
        )
        return token, issued_at + self.lifetime

    def validate(self, token: str) -> dict:
        return decode_token(
            token,
            secret=self.settings.jwt_secret,
            issuer=self.settings.jwt_issuer,
            audience=self.settings.jwt_audience,
            algorithm=self.settings.jwt_algorithm,
        )

    def user_id_from_token(self, token: str) -> UUID:
        claims = self.validate(token)
        try:
            return UUID(claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token", "TOKEN_INVALID")
