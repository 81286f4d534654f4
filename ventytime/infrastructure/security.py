"""Security Primitives — password hashing (passlib) and JWT encode/decode (PyJWT).

Invariants:
    - Password hashes are salted; plain passwords never leave this module
    - Tokens are HS256-signed and always carry iss, aud, exp, iat, jti
    - decode_token validates signature, issuer, audience and expiry with zero leeway
    - Every decoding failure is reported as AuthenticationError (401)

Design Decisions:
    - pbkdf2_sha256 scheme: pure-python in passlib, no native bcrypt backend needed
    - Functions take explicit secrets/issuer/audience, so tests run without Settings
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from ventytime.core.errors import AuthenticationError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized or malformed hash in the DB
        return False


def encode_token(
    claims: dict,
    secret: str,
    issuer: str,
    audience: str,
    expires_in: timedelta,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """Sign `claims` plus the registered claims into a compact JWT."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        **claims,
        "jti": str(uuid.uuid4()),
        "iat": issued_at,
        "exp": issued_at + expires_in,
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(
    token: str,
    secret: str,
    issuer: str,
    audience: str,
    algorithm: str = "HS256",
) -> dict:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            issuer=issuer,
            audience=audience,
            leeway=0,
            options={"require": ["exp", "iat", "sub", "iss", "aud"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", "TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token", "TOKEN_INVALID")
