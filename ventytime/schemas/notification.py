"""Notification Schemas — notification read model and counters."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from ventytime.core.domain_types import NotificationType, as_utc


class NotificationDto(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: UUID
    event_id: int | None = None
    title: str
    message: str
    type: NotificationType
    link: str | None = None
    is_read: bool
    is_dismissed: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class UnreadCount(BaseModel):
    count: int


class AffectedCount(BaseModel):
    affected: int
