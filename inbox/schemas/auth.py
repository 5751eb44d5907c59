"""Pydantic schemas for authentication."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from inbox.models import UserRole


class LoginRequest(BaseModel):
    """Credentials for POST /auth/login."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=6, description="Account password")


class RegisterRequest(BaseModel):
    """Request to create a dashboard user."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = Field(default=UserRole.STAFF, description="admin or staff")


class UserResponse(BaseModel):
    """A user without credentials."""

    id: UUID
    name: str
    email: str
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginData(BaseModel):
    """Payload returned by a successful login."""

    token: str
    user: UserResponse


class CurrentUser(BaseModel):
    """Identity carried by a bearer token."""

    user_id: UUID = Field(..., alias="userId")
    email: str
    role: UserRole

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
