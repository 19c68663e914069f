"""
Paste model.

A paste is a text snippet with syntax label, visibility tier, optional
expiry, optional owner and optional password. Pastes are soft-deleted only.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from pasteit.models.base import Base
from pasteit.models.enums import Visibility
from pasteit.models.mixins import CreatedAtMixin, SoftDeleteMixin


class Paste(Base, CreatedAtMixin, SoftDeleteMixin):
    """
    Paste model.

    Attributes:
        id: UUID primary key (internal)
        short_id: Unique public identifier used in all external references
        title: Optional title
        content: Paste body (required)
        syntax: Highlighting label, "plaintext" by default
        visibility: public, private or unlisted
        expires_at: NULL means the paste never expires
        owner_id: Owning account, NULL for anonymous pastes (no cascade)
        views: View counter, incremented atomically on reads
        password_hash: Argon2id hash when the paste is protected
        tags: Ordered list of tags
        created_at: Creation timestamp
        updated_at: Last modification, NULL until first update
        deleted: Soft delete flag

    Reachability:
        A paste is readable when deleted is false and expires_at is NULL
        or in the future. The expiry sweep only makes the flag catch up.
    """

    __tablename__ = "pastes"
    __table_args__ = (
        Index("ix_pastes_visibility_created_at", "visibility", "created_at"),
    )

    short_id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
    )

    title: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    syntax: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="plaintext",
    )

    visibility: Mapped[Visibility] = mapped_column(
        Enum(Visibility, name="paste_visibility", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Visibility.public,
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )

    views: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    tags: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )

    @property
    def is_protected(self) -> bool:
        """True when the paste requires a password to reveal its content."""
        return self.password_hash is not None

    def __repr__(self) -> str:
        return f"Paste(id={self.id}, short_id={self.short_id}, visibility={self.visibility})"
