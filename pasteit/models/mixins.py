"""
Reusable mixins for database models.

- CreatedAtMixin: immutable created_at timestamp
- SoftDeleteMixin: boolean deleted flag; records are never physically removed
"""

from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column


class CreatedAtMixin:
    """
    Mixin adding a UTC creation timestamp.

    The value is set once on insert and never updated.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )


class SoftDeleteMixin:
    """
    Mixin to add soft delete functionality to models.

    Adds:
    - deleted: True once the record has been soft-deleted

    Soft deleted records remain in the database but are filtered out from
    reads by the repositories.

    Querying with soft deletes:
        # Only live records
        live = select(Paste).where(Paste.deleted.is_(False))
    """

    deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )
