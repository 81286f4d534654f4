"""Auth Schemas — registration, login and token responses.

Invariants:
    - Emails are normalized to lower case before reaching services
    - Password length/confirmation rules live in core/enforce_auth.py (service-level 400s)
    - AuthResponse never carries the password hash
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from ventytime.core.domain_types import UserRole


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(max_length=100)
    confirm_password: str = Field(max_length=100)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    user_name: str | None = Field(None, max_length=256)
    phone_number: str | None = Field(None, max_length=30)
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    remember_me: bool = False

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class AuthResponse(BaseModel):
    """Successful register/login payload."""
    success: bool = True
    message: str = ""
    token: str
    user_id: UUID
    username: str
    email: str
    role: UserRole
    first_name: str = ""
    last_name: str = ""
    last_login_at: datetime | None = None
    expires_at: datetime | None = None
