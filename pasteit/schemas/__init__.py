"""Pydantic schemas for requests and responses."""

from pasteit.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    AuthResponse,
    LoginRequest,
    PasswordChange,
    Preferences,
    PublicProfile,
)
from pasteit.schemas.common import (
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)
from pasteit.schemas.paste import (
    PasteCreate,
    PasteResponse,
    PasteUnlock,
    PasteUpdate,
    SweepResponse,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountUpdate",
    "AuthResponse",
    "LoginRequest",
    "PasswordChange",
    "Preferences",
    "PublicProfile",
    "MessageResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "PasteCreate",
    "PasteResponse",
    "PasteUnlock",
    "PasteUpdate",
    "SweepResponse",
]
