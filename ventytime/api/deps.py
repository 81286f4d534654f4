"""Route Dependencies — bearer authentication and bounded upload reads.

Invariants:
    - No Authorization header, a bad token, or a missing/deactivated user
      all raise AuthenticationError (401)
    - Services share the request's AsyncSession (get_db is cached per request)
    - Upload bodies are read up to max_upload_bytes + 1, never in full
"""

import logging
from uuid import UUID

from fastapi import Depends, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.config import Settings, get_settings
from ventytime.core.errors import AuthenticationError
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.services.token_service import TokenService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def load_active_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise AuthenticationError("User is inactive or no longer exists", "USER_INACTIVE")
    return user


async def authenticate_token(token: str, db: AsyncSession, settings: Settings) -> User:
    user_id = TokenService(settings).user_id_from_token(token)
    return await load_active_user(db, user_id)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    if credentials is None:
        raise AuthenticationError()
    return await authenticate_token(credentials.credentials, db, settings)


async def read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """Read at most one byte past the limit so oversize files fail the size rule."""
    return await file.read(max_bytes + 1)
