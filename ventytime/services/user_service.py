"""User Service — profiles, password changes, notification settings and admin management.

Invariants:
    - Only Admin lists users, changes status/role, or deletes accounts
    - Changing a password requires the current password
    - A user who organizes events cannot be deleted (400)
    - Admins cannot deactivate, demote or delete their own account

Design Decisions:
    - Deleting a user removes their registrations, comments and notifications explicitly,
      so behavior does not depend on the database enforcing FK cascades
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.config import Settings
from ventytime.core.domain_types import UserRole, utcnow
from ventytime.core.enforce_access import check_role
from ventytime.core.enforce_auth import check_new_password
from ventytime.core.errors import BusinessRuleError, ResourceNotFoundError, ValidationError
from ventytime.infrastructure.security import hash_password, verify_password
from ventytime.models.comment import EventComment
from ventytime.models.event import Event
from ventytime.models.notification import Notification
from ventytime.models.registration import Registration
from ventytime.models.user import DEFAULT_AVATAR_URL, User
from ventytime.schemas.user import (
    AvatarResponse, ChangePasswordRequest, NotificationSettings, UpdateProfileRequest,
)
from ventytime.services.image_service import ImageService

logger = logging.getLogger(__name__)

ADMIN_ONLY = (UserRole.ADMIN,)


class UserService:

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def get_user(self, user_id: UUID) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def list_users(self, actor: User) -> list[User]:
        error = check_role(actor, ADMIN_ONLY, "list users")
        if error:
            raise error
        result = await self.db.execute(select(User).order_by(User.email))
        return list(result.scalars().all())

    async def get_roles(self, user_id: UUID) -> list[str]:
        user = await self.get_user(user_id)
        return [user.role]

    # ─── Self service ────────────────────────────────────────────

    async def update_profile(self, user: User, request: UpdateProfileRequest) -> User:
        changes = request.model_dump(exclude_unset=True)
        for name, value in changes.items():
            if name in ("first_name", "last_name", "user_name") and value is not None:
                value = value.strip()
                if not value:
                    raise ValidationError(f"{name} cannot be empty", field=name)
            if value is None and name != "phone_number":
                continue
            setattr(user, name, value)
        user.updated_at = utcnow()
        await self.db.commit()
        logger.info("Profile updated", extra={"user_id": user.id})
        return user

    async def change_password(self, user: User, request: ChangePasswordRequest) -> None:
        if not verify_password(request.current_password, user.password_hash):
            raise ValidationError(
                "Current password is incorrect", field="current_password",
            )
        error = check_new_password(request.new_password, request.confirm_password)
        if error:
            raise error
        user.password_hash = hash_password(request.new_password)
        user.updated_at = utcnow()
        await self.db.commit()
        logger.info("Password changed", extra={"user_id": user.id})

    def get_notification_settings(self, user: User) -> NotificationSettings:
        return NotificationSettings.model_validate(user)

    async def update_notification_settings(
        self, user: User, settings: NotificationSettings,
    ) -> NotificationSettings:
        for name, value in settings.model_dump().items():
            setattr(user, name, value)
        user.updated_at = utcnow()
        await self.db.commit()
        return NotificationSettings.model_validate(user)

    async def update_avatar(
        self, user: User, filename: str | None, data: bytes,
    ) -> AvatarResponse:
        images = ImageService(self.settings)
        uploaded = await images.upload(filename, data)
        previous = user.avatar_url
        user.avatar_url = uploaded.url
        user.updated_at = utcnow()
        await self.db.commit()
        if previous and previous != DEFAULT_AVATAR_URL:
            await images.delete(previous)
        return AvatarResponse(
            avatar_url=uploaded.url, thumbnail_url=uploaded.thumbnail_url,
        )

    # ─── Administration ──────────────────────────────────────────

    async def set_status(self, actor: User, user_id: UUID, is_active: bool) -> User:
        error = check_role(actor, ADMIN_ONLY, "change user status")
        if error:
            raise error
        user = await self.get_user(user_id)
        if user.id == actor.id and not is_active:
            raise BusinessRuleError(
                "Administrators cannot deactivate their own account", "SELF_MODIFICATION",
            )
        user.is_active = is_active
        user.updated_at = utcnow()
        await self.db.commit()
        logger.info(
            f"User status set to {'active' if is_active else 'inactive'}",
            extra={"user_id": user.id},
        )
        return user

    async def set_role(self, actor: User, user_id: UUID, role: UserRole) -> User:
        error = check_role(actor, ADMIN_ONLY, "change user roles")
        if error:
            raise error
        user = await self.get_user(user_id)
        if user.id == actor.id and role != UserRole.ADMIN:
            raise BusinessRuleError(
                "Administrators cannot change their own role", "SELF_MODIFICATION",
            )
        user.role = UserRole(role).value
        user.updated_at = utcnow()
        await self.db.commit()
        logger.info(f"User role set to {user.role}", extra={"user_id": user.id})
        return user

    async def delete_user(self, actor: User, user_id: UUID) -> None:
        error = check_role(actor, ADMIN_ONLY, "delete users")
        if error:
            raise error
        user = await self.get_user(user_id)
        if user.id == actor.id:
            raise BusinessRuleError(
                "Administrators cannot delete their own account", "SELF_MODIFICATION",
            )
        organized = await self.db.execute(
            select(func.count(Event.id)).where(Event.organizer_id == user.id)
        )
        if organized.scalar_one() > 0:
            raise BusinessRuleError(
                "Cannot delete a user who organizes events", "USER_HAS_EVENTS",
            )

        for model in (Registration, EventComment, Notification):
            await self.db.execute(delete(model).where(model.user_id == user.id))
        await self.db.delete(user)
        await self.db.commit()
        logger.info("User deleted", extra={"user_id": user_id})
