"""Auth Routes — register, login, current user and logout.

Invariants:
    - register/login are anonymous; me/logout require a bearer token
    - Logout is stateless: the client discards its token
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.api.deps import get_current_user
from ventytime.config import Settings, get_settings
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from ventytime.schemas.common import MessageResponse
from ventytime.schemas.user import UserDto
from ventytime.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await AuthService(db, settings).register(body)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await AuthService(db, settings).login(body)


@router.get("/me", response_model=UserDto)
async def me(user: User = Depends(get_current_user)):
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(user: User = Depends(get_current_user)):
    logger.info("User logged out", extra={"user_id": user.id})
    return MessageResponse(message="Logged out")
