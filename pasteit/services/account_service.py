"""
Account service: registration, authentication and profile updates.

This module provides:
- Registration with duplicate username/email detection
- Login with enumeration-resistant failures
- Account lookup and profile updates through an explicit allow-list
- Password change with verification of the current password
"""

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from pasteit.core.security import create_session_token, hash_password, verify_password
from pasteit.exceptions import (
    AccountDisabledError,
    DuplicateEmailError,
    DuplicateUsernameError,
    ImmutableFieldError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
)
from pasteit.models.account import Account, default_preferences
from pasteit.models.enums import Role
from pasteit.repositories.account_repository import AccountRepository
from pasteit.schemas.account import AccountResponse

logger = logging.getLogger(__name__)

# Keys an account update may carry. Anything else is rejected.
ACCOUNT_UPDATABLE_FIELDS = frozenset({"email", "password", "preferences", "is_active"})

# Keys that are never writable through update(); listed for error reporting.
ACCOUNT_IMMUTABLE_FIELDS = frozenset({"id", "username", "role", "created_at", "password_hash"})


def sanitize_account_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate the keys of an account update against the allow-list.

    Args:
        updates: Raw partial update

    Returns:
        Copy of the update restricted to updatable keys

    Raises:
        ImmutableFieldError: If any key is outside ACCOUNT_UPDATABLE_FIELDS
    """
    rejected = [key for key in updates if key not in ACCOUNT_UPDATABLE_FIELDS]
    if rejected:
        raise ImmutableFieldError(rejected)
    return {key: updates[key] for key in updates}


class AccountService:
    """
    Service class for account operations.

    All methods require an active database session. Returned accounts are
    always AccountResponse instances, which have no password hash field.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize AccountService.

        Args:
            session: Async database session
        """
        self.session = session
        self.account_repo = AccountRepository(session)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
    ) -> tuple[AccountResponse, str]:
        """
        Register a new account and issue a session token.

        This method:
        1. Rejects empty username, email or password
        2. Checks email then username uniqueness
        3. Hashes the password and inserts the account
        4. Issues a session token

        The unique constraints are the backstop for concurrent registrations:
        a violation at insert time raises the same errors as the pre-checks.

        Returns:
            Tuple of (AccountResponse, session token)

        Raises:
            InvalidInputError: If a field is empty
            DuplicateEmailError: If the email is already registered
            DuplicateUsernameError: If the username is already taken
        """
        for field, value in (("username", username), ("email", email), ("password", password)):
            if not value:
                raise InvalidInputError(field, f"{field.capitalize()} is required")

        if await self.account_repo.email_exists(email):
            logger.warning(f"Registration attempted with existing email: {email}")
            raise DuplicateEmailError()

        if await self.account_repo.username_exists(username):
            logger.warning(f"Registration attempted with existing username: {username}")
            raise DuplicateUsernameError()

        account = Account(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=Role.user,
            is_active=True,
            last_login_at=None,
            preferences=default_preferences(),
        )
        account = await self.account_repo.add(account)
        await self.account_repo.commit()

        logger.info(f"Account registered successfully: {account.id} ({account.username})")

        return AccountResponse.model_validate(account), self._issue_token(account)

    async def login(self, email: str, password: str) -> tuple[AccountResponse, str]:
        """
        Authenticate an account and issue a fresh session token.

        Unknown email and wrong password raise the same error with the same
        message, so callers cannot tell which one failed.

        Returns:
            Tuple of (AccountResponse, session token)

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountDisabledError: Known email of an inactive account, checked
                before the password
        """
        account = await self.account_repo.get_by_email(email)
        if account is None:
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not account.is_active:
            logger.warning(f"Login rejected: account {account.id} is disabled")
            raise AccountDisabledError()

        if not verify_password(password, account.password_hash):
            logger.warning(f"Login failed: invalid password for account {account.id}")
            raise InvalidCredentialsError()

        await self.account_repo.update_last_login(account)
        await self.account_repo.commit()

        logger.info(f"Account logged in successfully: {account.id}")

        return AccountResponse.model_validate(account), self._issue_token(account)

    async def get_by_id(self, account_id: uuid.UUID) -> AccountResponse:
        """
        Get an account by ID.

        Raises:
            NotFoundError: If no account has this ID
        """
        account = await self._get_account(account_id)
        return AccountResponse.model_validate(account)

    async def get_account(self, account_id: uuid.UUID) -> Account | None:
        """Load the account model, or None. Used by the auth dependency."""
        return await self.account_repo.get_by_id(account_id)

    async def update(self, account_id: uuid.UUID, updates: Mapping[str, Any]) -> bool:
        """
        Apply a partial update to an account.

        Allowed keys are email, password, preferences and is_active. A
        password is re-hashed before it is stored.

        Args:
            account_id: Account to update
            updates: Partial update

        Returns:
            True if any stored value changed

        Raises:
            ImmutableFieldError: If the update names any other key
            InvalidInputError: If an allowed key carries an empty value
            NotFoundError: If the account does not exist
            DuplicateEmailError: If the new email belongs to another account
        """
        sanitized = sanitize_account_updates(updates)
        account = await self._get_account(account_id)

        changed = False

        if "email" in sanitized:
            email = sanitized["email"]
            if not email:
                raise InvalidInputError("email", "Email is required")
            if email != account.email:
                if await self.account_repo.email_exists(email, exclude_id=account.id):
                    logger.warning(f"Account {account.id} attempted to take an existing email")
                    raise DuplicateEmailError()
                account.email = email
                changed = True

        if "password" in sanitized:
            password = sanitized["password"]
            if not password:
                raise InvalidInputError("password", "Password is required")
            if not verify_password(password, account.password_hash):
                account.password_hash = hash_password(password)
                changed = True

        if "preferences" in sanitized:
            preferences = {**default_preferences(), **dict(sanitized["preferences"] or {})}
            if preferences != account.preferences:
                account.preferences = preferences
                changed = True

        if "is_active" in sanitized:
            is_active = sanitized["is_active"]
            if is_active is None:
                raise InvalidInputError("is_active", "is_active must be true or false")
            if bool(is_active) != account.is_active:
                account.is_active = bool(is_active)
                changed = True

        if changed:
            await self.account_repo.save()
            await self.account_repo.commit()
            logger.info(f"Account updated: {account.id} (fields: {sorted(sanitized)})")

        return changed

    async def change_password(
        self,
        account_id: uuid.UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Change an account's password after verifying the current one.

        Raises:
            NotFoundError: If the account does not exist
            InvalidCredentialsError: If the current password is wrong
            InvalidInputError: If the new password is empty
        """
        account = await self._get_account(account_id)

        if not verify_password(current_password, account.password_hash):
            logger.warning(f"Password change failed: wrong current password for {account.id}")
            raise InvalidCredentialsError("Current password is incorrect")

        if not new_password:
            raise InvalidInputError("new_password", "New password is required")

        account.password_hash = hash_password(new_password)
        await self.account_repo.save()
        await self.account_repo.commit()

        logger.info(f"Password changed for account {account.id}")

    async def _get_account(self, account_id: uuid.UUID) -> Account:
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise NotFoundError("Account")
        return account

    @staticmethod
    def _issue_token(account: Account) -> str:
        return create_session_token(
            account_id=account.id,
            username=account.username,
            role=account.role.value,
        )
