"""
Paste repository for paste-specific database operations.

Reads that serve callers go through the reachability filter: a paste is
reachable when it is not soft-deleted and has not expired. Expiry is always
compared in SQL so that a paste past its expiry is unreachable even before
the sweep flags it.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from pasteit.exceptions import ShortIdCollisionError
from pasteit.models.enums import Visibility
from pasteit.models.paste import Paste
from pasteit.repositories.base import BaseRepository
from pasteit.schemas.common import PaginationParams

logger = logging.getLogger(__name__)

FULLTEXT_INDEX_NAME = "ix_pastes_fulltext"
FULLTEXT_DOCUMENT = "to_tsvector('english', coalesce(title, '') || ' ' || content)"


def live_conditions(now: datetime | None = None) -> list[ColumnElement[bool]]:
    """Conditions shared by every caller-facing read: not deleted, not expired."""
    now = now or datetime.now(UTC)
    return [
        Paste.deleted.is_(False),
        or_(Paste.expires_at.is_(None), Paste.expires_at > now),
    ]


class PasteRepository(BaseRepository[Paste]):
    """
    Repository for Paste model operations.

    Extends BaseRepository with:
    - Short ID lookups, with and without the reachability filter
    - Atomic view counting
    - Filtered, paginated listings and free-text search
    - The bulk expiry sweep
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Paste, session)

    async def add(self, instance: Paste) -> Paste:
        """
        Insert a paste.

        Raises:
            ShortIdCollisionError: short_id already in use; nothing is overwritten
        """
        try:
            return await super().add(instance)
        except IntegrityError as e:
            await self.rollback()
            logger.warning(f"Short ID collision on insert: {instance.short_id}")
            raise ShortIdCollisionError() from e

    async def get_by_short_id(self, short_id: str) -> Paste | None:
        """
        Get a paste by short ID regardless of deletion or expiry.

        Used by owner operations (update, delete).
        """
        result = await self._execute(select(Paste).where(Paste.short_id == short_id))
        return result.scalar_one_or_none()

    async def get_reachable(self, short_id: str) -> Paste | None:
        """Get a paste by short ID if it is neither deleted nor expired."""
        query = select(Paste).where(Paste.short_id == short_id, *live_conditions())
        result = await self._execute(query)
        return result.scalar_one_or_none()

    async def increment_views(self, short_id: str) -> Paste | None:
        """
        Atomically add one view to a reachable paste and return it.

        The lookup and the increment are a single UPDATE ... RETURNING, so
        concurrent readers each get their own increment. The returned counter
        is the one produced by this UPDATE, not a later read.

        Returns:
            The paste with its updated counter, or None if not reachable
        """
        statement = (
            update(Paste)
            .where(Paste.short_id == short_id, *live_conditions())
            .values(views=Paste.views + 1)
            .returning(Paste.id, Paste.views)
            .execution_options(synchronize_session=False)
        )
        row = (await self._execute(statement)).one_or_none()
        if row is None:
            return None

        result = await self._execute(
            select(Paste)
            .where(Paste.id == row.id)
            .execution_options(populate_existing=True)
        )
        paste = result.scalar_one()
        set_committed_value(paste, "views", row.views)
        return paste

    async def list_filtered(
        self,
        pagination: PaginationParams,
        *conditions: ColumnElement[bool],
    ) -> tuple[list[Paste], int]:
        """
        List live pastes matching extra conditions, newest first.

        Args:
            pagination: Page and limit
            *conditions: Additional WHERE clauses

        Returns:
            Tuple of (page of pastes, total matching count)
        """
        where = [*live_conditions(), *conditions]

        count_result = await self._execute(
            select(func.count()).select_from(Paste).where(*where)
        )
        total = count_result.scalar_one()

        query = (
            select(Paste)
            .where(*where)
            .order_by(Paste.created_at.desc(), Paste.id.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        result = await self._execute(query)
        return list(result.scalars().all()), total

    async def list_recent_public(
        self,
        pagination: PaginationParams,
        syntax: str | None = None,
    ) -> tuple[list[Paste], int]:
        """List public pastes, optionally restricted to one syntax."""
        conditions: list[Any] = [Paste.visibility == Visibility.public]
        if syntax:
            conditions.append(Paste.syntax == syntax)
        return await self.list_filtered(pagination, *conditions)

    async def list_by_owner(
        self,
        owner_id: Any,
        pagination: PaginationParams,
        visibility: Visibility | None = None,
    ) -> tuple[list[Paste], int]:
        """List an owner's pastes, optionally restricted to one visibility."""
        conditions: list[Any] = [Paste.owner_id == owner_id]
        if visibility is not None:
            conditions.append(Paste.visibility == visibility)
        return await self.list_filtered(pagination, *conditions)

    async def search_public(
        self,
        query: str | None,
        pagination: PaginationParams,
    ) -> tuple[list[Paste], int]:
        """
        Free-text search over title and content of public pastes.

        PostgreSQL uses full-text search backed by a GIN index created on
        first use. Other dialects fall back to a case-insensitive substring
        match. An empty query lists all public pastes.
        """
        conditions: list[Any] = [Paste.visibility == Visibility.public]
        query = (query or "").strip()
        if query:
            if self._dialect_name() == "postgresql":
                await self.ensure_fulltext_index()
                conditions.append(
                    text(f"{FULLTEXT_DOCUMENT} @@ plainto_tsquery('english', :q)").bindparams(q=query)
                )
            else:
                conditions.append(
                    or_(
                        Paste.title.icontains(query, autoescape=True),
                        Paste.content.icontains(query, autoescape=True),
                    )
                )
        return await self.list_filtered(pagination, *conditions)

    async def ensure_fulltext_index(self) -> None:
        """
        Create the full-text index if it does not exist yet.

        Runs in a savepoint; a failure is logged and ignored so the search
        itself still runs.
        """
        statement = text(
            f"CREATE INDEX IF NOT EXISTS {FULLTEXT_INDEX_NAME} "
            f"ON pastes USING GIN ({FULLTEXT_DOCUMENT})"
        )
        try:
            async with self.session.begin_nested():
                await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.warning(f"Could not ensure full-text index: {e.__class__.__name__}")

    async def sweep_expired(self) -> int:
        """
        Flag every expired, not yet deleted paste as deleted.

        Returns:
            Number of pastes flagged by this call
        """
        statement = (
            update(Paste)
            .where(
                Paste.expires_at.is_not(None),
                Paste.expires_at < datetime.now(UTC),
                Paste.deleted.is_(False),
            )
            .values(deleted=True)
            .execution_options(synchronize_session=False)
        )
        result = await self._execute(statement)
        return result.rowcount or 0

    def _dialect_name(self) -> str:
        return self.session.get_bind().dialect.name
