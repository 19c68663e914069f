"""
Account schemas.

Response models never include the password hash; they are the only shapes
the services hand back to callers.
"""

import uuid
from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

from pasteit.core.config import settings
from pasteit.models.enums import Role, Visibility


def _check_password_length(value: str) -> str:
    if len(value) < settings.password_min_length:
        raise ValueError(
            f"Password must be at least {settings.password_min_length} characters long"
        )
    return value


NewPassword = Annotated[str, Field(max_length=128), AfterValidator(_check_password_length)]


class Preferences(BaseModel):
    """Defaults a client may use when creating pastes. Not enforced."""

    default_syntax: str = Field(default="plaintext", max_length=50)
    default_expiration: str = Field(default="never", max_length=50)
    default_visibility: Visibility = Field(default=Visibility.public)


class AccountCreate(BaseModel):
    """Registration request."""

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: NewPassword


class LoginRequest(BaseModel):
    """Login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AccountUpdate(BaseModel):
    """
    Profile update request.

    Unknown keys are kept so that the service can reject attempts to change
    immutable fields instead of silently ignoring them.
    """

    model_config = ConfigDict(extra="allow")

    email: EmailStr | None = None
    password: NewPassword | None = None
    preferences: Preferences | None = None
    is_active: bool | None = None


class PasswordChange(BaseModel):
    """Password change request."""

    current_password: str = Field(..., min_length=1)
    new_password: NewPassword


class AccountResponse(BaseModel):
    """Account as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None
    preferences: dict[str, Any]


class PublicProfile(BaseModel):
    """Account as visible to anyone."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    created_at: datetime


class AuthResponse(BaseModel):
    """Result of registration and login."""

    account: AccountResponse
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(
        default_factory=lambda: settings.session_token_expire_days * 86400,
        description="Token lifetime in seconds",
    )
