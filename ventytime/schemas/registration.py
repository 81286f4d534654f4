"""Registration Schemas — registration read model and status updates."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from ventytime.core.domain_types import RegistrationStatus


class RegistrationDto(BaseModel):
    id: int
    event_id: int
    user_id: UUID
    status: RegistrationStatus
    registered_at: datetime
    updated_at: datetime | None = None
    event_title: str
    event_start_date: datetime
    user_name: str
    user_email: str


class UpdateRegistrationStatusRequest(BaseModel):
    status: RegistrationStatus
