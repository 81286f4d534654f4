"""User Schemas — profile read model and self-service/admin update payloads.

Invariants:
    - UserDto never exposes password_hash or lockout internals
    - Profile field bounds mirror the users table (names 50, bio 500, location 100, website 200)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ventytime.core.domain_types import UserRole, as_utc


class UserDto(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    user_name: str
    first_name: str
    last_name: str
    full_name: str
    role: UserRole
    avatar_url: str
    bio: str
    location: str
    website: str
    phone_number: str | None = None
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None

    @field_validator("created_at", "last_login_at")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


class UpdateProfileRequest(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    user_name: str | None = Field(None, min_length=1, max_length=256)
    bio: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=100)
    website: str | None = Field(None, max_length=200)
    phone_number: str | None = Field(None, max_length=30)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str
    confirm_password: str


class NotificationSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email_notifications: bool = True
    push_notifications: bool = True
    event_reminders: bool = True
    new_comment_notifications: bool = True


class UpdateUserStatusRequest(BaseModel):
    is_active: bool


class UpdateUserRoleRequest(BaseModel):
    role: UserRole


class AvatarResponse(BaseModel):
    avatar_url: str
    thumbnail_url: str
