"""User Routes — self-service profile endpoints and Admin user management.

Invariants:
    - Every endpoint requires a bearer token
    - /me paths are declared before /{user_id}
    - Admin-only checks happen in UserService (403 for other roles)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.api.deps import get_current_user, read_upload
from ventytime.config import Settings, get_settings
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.schemas.common import MessageResponse
from ventytime.schemas.user import (
    AvatarResponse, ChangePasswordRequest, NotificationSettings, UpdateProfileRequest,
    UpdateUserRoleRequest, UpdateUserStatusRequest, UserDto,
)
from ventytime.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserDto])
async def list_users(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).list_users(user)


# ─── Current user ────────────────────────────────────────────────

@router.get("/me", response_model=UserDto)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.put("/me", response_model=UserDto)
async def update_me(
    body: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).update_profile(user, body)


@router.post("/me/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await UserService(db, settings).change_password(user, body)
    return MessageResponse(message="Password changed successfully")


@router.get("/me/notification-settings", response_model=NotificationSettings)
async def get_notification_settings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return UserService(db, settings).get_notification_settings(user)


@router.put("/me/notification-settings", response_model=NotificationSettings)
async def update_notification_settings(
    body: NotificationSettings,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).update_notification_settings(user, body)


@router.post("/me/avatar", response_model=AvatarResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    data = await read_upload(file, settings.max_upload_bytes)
    return await UserService(db, settings).update_avatar(user, file.filename, data)


# ─── By id ───────────────────────────────────────────────────────

@router.get("/{user_id}", response_model=UserDto)
async def get_user(
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).get_user(user_id)


@router.get("/{user_id}/roles", response_model=list[str])
async def get_user_roles(
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).get_roles(user_id)


@router.put("/{user_id}/status", response_model=UserDto)
async def update_user_status(
    user_id: UUID,
    body: UpdateUserStatusRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).set_status(user, user_id, body.is_active)


@router.put("/{user_id}/role", response_model=UserDto)
async def update_user_role(
    user_id: UUID,
    body: UpdateUserRoleRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return await UserService(db, settings).set_role(user, user_id, body.role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await UserService(db, settings).delete_user(user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
