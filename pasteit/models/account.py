"""
Account model.

Accounts authenticate users and own pastes. They are never physically
deleted; disabling an account (is_active=False) blocks login.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, Enum, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from pasteit.models.base import Base
from pasteit.models.enums import Role
from pasteit.models.mixins import CreatedAtMixin


def default_preferences() -> dict[str, Any]:
    """Preferences stored on a freshly registered account."""
    return {
        "default_syntax": "plaintext",
        "default_expiration": "never",
        "default_visibility": "public",
    }


class Account(Base, CreatedAtMixin):
    """
    Account model for authentication and paste ownership.

    Attributes:
        id: UUID primary key
        username: Unique username
        email: Unique email address
        password_hash: Argon2id hashed password (never returned to callers)
        role: user or admin; not changeable through profile updates
        is_active: Disabled accounts cannot log in
        last_login_at: Timestamp of last successful login
        preferences: Informational defaults for new pastes
        created_at: When the account was created
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="account_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.user,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    preferences: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=default_preferences,
    )

    def __repr__(self) -> str:
        return f"Account(id={self.id}, username={self.username}, email={self.email})"
