"""
Paste service: creation, access-gated reads, owner updates and listings.

Business rules enforced here:
- Content is required and private pastes need an owner
- Protected pastes reveal content only with the right password
- Every counted read adds exactly one view, before the password gate
- Only the owner of an owned paste may update or delete it
- Deletion is always the soft-delete flag
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from pasteit.core.security import generate_short_id, hash_password, verify_password
from pasteit.exceptions import (
    EmptyContentError,
    InvalidInputError,
    InvalidPasswordError,
    LoginRequiredForPrivateError,
    NotAuthorizedError,
    NotFoundError,
    PasteNotFoundOrExpiredError,
)
from pasteit.models.enums import Visibility
from pasteit.models.paste import Paste
from pasteit.repositories.paste_repository import PasteRepository
from pasteit.schemas.common import PaginatedResponse, PaginationMeta, PaginationParams
from pasteit.schemas.paste import PasteCreate, PasteResponse

logger = logging.getLogger(__name__)

# Keys a paste update may change. Everything else (id, short_id, created_at,
# owner_id, views, deleted, ...) is dropped without error.
PASTE_UPDATABLE_FIELDS = frozenset(
    {"title", "content", "syntax", "visibility", "expires_at", "tags", "password"}
)


def sanitize_paste_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Restrict a paste update to PASTE_UPDATABLE_FIELDS, silently dropping the rest."""
    return {key: value for key, value in updates.items() if key in PASTE_UPDATABLE_FIELDS}


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a timestamp to aware UTC. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class PasteService:
    """
    Service class for paste operations.

    All methods require an active database session. Returned pastes are
    PasteResponse instances, which never carry the password hash.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.paste_repo = PasteRepository(session)

    async def create(
        self,
        paste_data: PasteCreate,
        owner_id: uuid.UUID | None = None,
    ) -> PasteResponse:
        """
        Create a paste with a fresh short ID.

        Validation order: empty content, then private without owner. The
        service does not retry on a short ID collision; callers may call
        create() again.

        Args:
            paste_data: Paste options
            owner_id: Creating account, None for anonymous pastes

        Returns:
            The created paste

        Raises:
            EmptyContentError: If content is empty
            LoginRequiredForPrivateError: If a private paste has no owner
            ShortIdCollisionError: If the generated short ID is taken
        """
        if not paste_data.content:
            raise EmptyContentError()

        if paste_data.visibility == Visibility.private and owner_id is None:
            logger.warning("Rejected anonymous private paste")
            raise LoginRequiredForPrivateError()

        paste = Paste(
            short_id=generate_short_id(),
            title=paste_data.title,
            content=paste_data.content,
            syntax=paste_data.syntax,
            visibility=paste_data.visibility,
            expires_at=as_utc(paste_data.expires_at),
            owner_id=owner_id,
            views=0,
            password_hash=hash_password(paste_data.password) if paste_data.password else None,
            tags=list(paste_data.tags),
            deleted=False,
            created_at=datetime.now(UTC),
        )
        paste = await self.paste_repo.add(paste)
        await self.paste_repo.commit()

        logger.info(
            f"Paste created: {paste.short_id} (visibility={paste.visibility.value}, "
            f"owner={owner_id}, protected={paste.is_protected})"
        )
        return PasteResponse.from_paste(paste)

    async def get_by_short_id(
        self,
        short_id: str,
        increment_views: bool = True,
        password: str | None = None,
    ) -> PasteResponse:
        """
        Read a reachable paste.

        With increment_views the lookup itself is the atomic view increment,
        so the view counts even when the password gate then hides the content
        or rejects the password.

        Args:
            short_id: Public paste ID
            increment_views: Count this read as a view
            password: Plaintext password for protected pastes

        Returns:
            The paste. A protected paste read without a password has empty
            content and is_protected=True.

        Raises:
            PasteNotFoundOrExpiredError: Missing, deleted or expired paste
            InvalidPasswordError: Wrong password for a protected paste
        """
        if increment_views:
            paste = await self.paste_repo.increment_views(short_id)
            if paste is not None:
                await self.paste_repo.commit()
        else:
            paste = await self.paste_repo.get_reachable(short_id)

        if paste is None:
            raise PasteNotFoundOrExpiredError()

        if not paste.is_protected:
            return PasteResponse.from_paste(paste)

        if not password:
            return PasteResponse.from_paste(paste, reveal_content=False)

        if not verify_password(password, paste.password_hash):
            logger.warning(f"Invalid password for paste {short_id}")
            raise InvalidPasswordError()

        return PasteResponse.from_paste(paste)

    async def ensure_readable(
        self,
        short_id: str,
        requester_id: uuid.UUID | None = None,
        is_admin: bool = False,
    ) -> None:
        """
        Check that a requester may read a paste, without counting a view.

        Private pastes are readable by their owner and by admins only.

        Raises:
            PasteNotFoundOrExpiredError: Missing, deleted or expired paste
            NotAuthorizedError: Private paste of another account
        """
        paste = await self.paste_repo.get_reachable(short_id)
        if paste is None:
            raise PasteNotFoundOrExpiredError()

        if paste.visibility == Visibility.private and not is_admin:
            if requester_id is None or paste.owner_id != requester_id:
                logger.warning(f"Denied read of private paste {short_id}")
                raise NotAuthorizedError("This paste is private")

    async def update(
        self,
        short_id: str,
        requester_id: uuid.UUID | None,
        updates: Mapping[str, Any],
    ) -> bool:
        """
        Apply a partial update to a paste.

        The lookup ignores expiry and deletion. Keys outside
        PASTE_UPDATABLE_FIELDS are dropped. A non-empty password is hashed;
        an empty or null password removes the protection.

        Returns:
            True if anything changed (updated_at is then set)

        Raises:
            NotFoundError: If no paste has this short ID
            NotAuthorizedError: If the paste is owned by another account
            EmptyContentError: If content would become empty
            LoginRequiredForPrivateError: If an ownerless paste would become private
        """
        paste = await self._get_for_owner(short_id, requester_id)
        sanitized = sanitize_paste_updates(updates)

        changes: dict[str, Any] = {}

        if "content" in sanitized:
            if not sanitized["content"]:
                raise EmptyContentError()
            changes["content"] = sanitized["content"]

        if "visibility" in sanitized:
            if sanitized["visibility"] is None:
                raise InvalidInputError("visibility", "Visibility cannot be null")
            try:
                visibility = Visibility(sanitized["visibility"])
            except ValueError as e:
                raise InvalidInputError(
                    "visibility", f"Unknown visibility: {sanitized['visibility']}"
                ) from e
            if visibility == Visibility.private and paste.owner_id is None:
                raise LoginRequiredForPrivateError()
            changes["visibility"] = visibility

        if "syntax" in sanitized:
            if not sanitized["syntax"]:
                raise InvalidInputError("syntax", "Syntax cannot be empty")
            changes["syntax"] = sanitized["syntax"]

        if "title" in sanitized:
            changes["title"] = sanitized["title"]

        if "tags" in sanitized:
            changes["tags"] = list(sanitized["tags"] or [])

        if "expires_at" in sanitized:
            expires_at = as_utc(sanitized["expires_at"])
            if expires_at != as_utc(paste.expires_at):
                paste.expires_at = expires_at
                changes["expires_at"] = expires_at

        changed = "expires_at" in changes
        for field, value in changes.items():
            if field != "expires_at" and getattr(paste, field) != value:
                setattr(paste, field, value)
                changed = True

        if "password" in sanitized:
            password = sanitized["password"]
            if password:
                if not paste.is_protected or not verify_password(password, paste.password_hash):
                    paste.password_hash = hash_password(password)
                    changed = True
            elif paste.is_protected:
                paste.password_hash = None
                changed = True

        if not changed:
            return False

        paste.updated_at = datetime.now(UTC)
        await self.paste_repo.flush()
        await self.paste_repo.commit()

        logger.info(f"Paste updated: {short_id} (fields: {sorted(sanitized)})")
        return True

    async def delete(self, short_id: str, requester_id: uuid.UUID | None) -> bool:
        """
        Soft-delete a paste.

        Returns:
            True if the paste was deleted by this call, False if it already was

        Raises:
            NotFoundError: If no paste has this short ID
            NotAuthorizedError: If the paste is owned by another account
        """
        paste = await self._get_for_owner(short_id, requester_id)
        if paste.deleted:
            return False

        paste.deleted = True
        await self.paste_repo.flush()
        await self.paste_repo.commit()

        logger.info(f"Paste deleted: {short_id}")
        return True

    async def list_recent_public(
        self,
        pagination: PaginationParams,
        syntax: str | None = None,
    ) -> PaginatedResponse[PasteResponse]:
        """List live public pastes, newest first, optionally for one syntax."""
        pastes, total = await self.paste_repo.list_recent_public(pagination, syntax)
        return self._page(pastes, total, pagination)

    async def search(
        self,
        query: str | None,
        pagination: PaginationParams,
    ) -> PaginatedResponse[PasteResponse]:
        """Free-text search over live public pastes, newest first."""
        pastes, total = await self.paste_repo.search_public(query, pagination)
        return self._page(pastes, total, pagination)

    async def list_by_owner(
        self,
        owner_id: uuid.UUID,
        pagination: PaginationParams,
        visibility: Visibility | None = None,
    ) -> PaginatedResponse[PasteResponse]:
        """
        List an owner's live pastes.

        The visibility filter is trusted as given; deciding which visibilities
        a requester may see belongs to the caller.
        """
        pastes, total = await self.paste_repo.list_by_owner(owner_id, pagination, visibility)
        return self._page(pastes, total, pagination)

    async def sweep_expired(self) -> int:
        """
        Soft-delete every paste whose expiry has passed.

        Returns:
            Number of pastes newly flagged (0 on an immediate second run)
        """
        count = await self.paste_repo.sweep_expired()
        await self.paste_repo.commit()
        logger.info(f"Expiry sweep flagged {count} paste(s) as deleted")
        return count

    async def _get_for_owner(self, short_id: str, requester_id: uuid.UUID | None) -> Paste:
        paste = await self.paste_repo.get_by_short_id(short_id)
        if paste is None:
            raise NotFoundError("Paste")

        if paste.owner_id is not None and paste.owner_id != requester_id:
            logger.warning(f"Account {requester_id} denied access to paste {short_id}")
            raise NotAuthorizedError()

        return paste

    @staticmethod
    def _page(
        pastes: list[Paste],
        total: int,
        pagination: PaginationParams,
    ) -> PaginatedResponse[PasteResponse]:
        return PaginatedResponse[PasteResponse](
            items=[PasteResponse.for_listing(paste) for paste in pastes],
            pagination=PaginationMeta.build(total, pagination),
        )
