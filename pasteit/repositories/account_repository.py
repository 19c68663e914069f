"""
Account repository for account-specific database operations.

This module provides database operations for the Account model,
including authentication lookups, uniqueness checks and login tracking.
"""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pasteit.exceptions import ConflictError, DuplicateEmailError, DuplicateUsernameError
from pasteit.models.account import Account
from pasteit.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def translate_account_integrity_error(error: IntegrityError) -> Exception:
    """
    Map a unique violation on the users table to the matching conflict.

    PostgreSQL reports the constraint name (uq_users_username), SQLite the
    column (users.username); both are matched.
    """
    message = str(error.orig)
    if "uq_users_username" in message or "users.username" in message:
        return DuplicateUsernameError()
    if "uq_users_email" in message or "users.email" in message:
        return DuplicateEmailError()
    return ConflictError("Account conflicts with an existing record")


class AccountRepository(BaseRepository[Account]):
    """
    Repository for Account model operations.

    Extends BaseRepository with account-specific queries:
    - Email lookup (for authentication)
    - Email and username existence checks (registration pre-checks)
    - Activity tracking (last login updates)
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    async def get_by_email(self, email: str) -> Account | None:
        """
        Get account by email address.

        Args:
            email: Email address to search for

        Returns:
            Account instance or None if not found
        """
        result = await self._execute(select(Account).where(Account.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str, exclude_id: uuid.UUID | None = None) -> bool:
        """
        Check whether an email is already registered.

        Args:
            email: Email to check
            exclude_id: Account to ignore (used when an account changes its own email)
        """
        condition = Account.email == email
        if exclude_id is not None:
            condition = condition & (Account.id != exclude_id)
        result = await self._execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def username_exists(self, username: str) -> bool:
        """Check whether a username is already taken."""
        result = await self._execute(select(exists().where(Account.username == username)))
        return bool(result.scalar())

    async def add(self, instance: Account) -> Account:
        """
        Insert an account.

        Raises:
            DuplicateUsernameError: username unique constraint violated
            DuplicateEmailError: email unique constraint violated
        """
        try:
            return await super().add(instance)
        except IntegrityError as e:
            await self.rollback()
            logger.warning("Account insert rejected by unique constraint")
            raise translate_account_integrity_error(e) from e

    async def save(self) -> None:
        """
        Flush modifications of a loaded account.

        Raises:
            DuplicateEmailError: the new email was taken concurrently
        """
        try:
            await self.flush()
        except IntegrityError as e:
            await self.rollback()
            logger.warning("Account update rejected by unique constraint")
            raise translate_account_integrity_error(e) from e

    async def update_last_login(self, account: Account) -> None:
        """
        Set the account's last login timestamp to the current time.

        Called after successful authentication to track activity.

        Args:
            account: Loaded account instance
        """
        account.last_login_at = datetime.now(UTC)
        await self.flush()
