"""
FastAPI dependencies for authentication and authorization.

This module provides:
- Current account extraction from the session token
- Optional authentication for routes open to anonymous callers
- Admin role checking
- Service construction per request
"""

import logging
import uuid
from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from pasteit.core.config import settings
from pasteit.core.database import get_db
from pasteit.core.security import TOKEN_TYPE_SESSION, decode_token, verify_token_type
from pasteit.exceptions import (
    AccountDisabledError,
    InvalidTokenError,
    LoginRequiredError,
    NotAuthorizedError,
)
from pasteit.models.account import Account
from pasteit.models.enums import Role
from pasteit.repositories.account_repository import AccountRepository
from pasteit.schemas.common import MAX_PAGE_SIZE, PaginationParams
from pasteit.services import AccountService, PasteService

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI
security = HTTPBearer(
    scheme_name="Bearer",
    description="Enter your session token",
    auto_error=False,
)


async def _resolve_account(token: str, db: AsyncSession) -> Account:
    """Decode a session token and load its account."""
    try:
        token_data = decode_token(token)
    except JWTError:
        raise InvalidTokenError()

    if not verify_token_type(token_data, TOKEN_TYPE_SESSION):
        logger.warning("Authentication failed: wrong token type")
        raise InvalidTokenError("Invalid token type")

    try:
        account_id = uuid.UUID(str(token_data.get("sub")))
    except ValueError:
        logger.warning("Authentication failed: invalid subject in token")
        raise InvalidTokenError("Invalid token payload")

    account = await AccountRepository(db).get_by_id(account_id)
    if account is None:
        logger.warning(f"Authentication failed: account not found - {account_id}")
        raise InvalidTokenError("Account not found")

    if not account.is_active:
        logger.warning(f"Authentication failed: account {account_id} is disabled")
        raise AccountDisabledError()

    return account


async def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Account:
    """
    Dependency returning the authenticated account.

    Raises:
        LoginRequiredError: No bearer token was sent
        InvalidTokenError: Token is invalid, expired or names no account
        AccountDisabledError: The account has been deactivated
    """
    if credentials is None:
        raise LoginRequiredError()
    return await _resolve_account(credentials.credentials, db)


async def get_optional_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Account | None:
    """
    Dependency returning the account when a token is sent, None otherwise.

    A token that is sent but invalid is still rejected.
    """
    if credentials is None:
        return None
    return await _resolve_account(credentials.credentials, db)


async def require_admin(
    current_account: Account = Depends(get_current_account),
) -> Account:
    """
    Dependency to ensure the account has the admin role.

    Raises:
        NotAuthorizedError: The account is not an admin
    """
    if current_account.role != Role.admin:
        logger.warning(f"Admin access denied for account {current_account.id}")
        raise NotAuthorizedError("Admin privileges required")
    return current_account


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Number of items per page",
    ),
) -> PaginationParams:
    """Pagination query parameters, validated as part of the request."""
    return PaginationParams(page=page, limit=limit)


def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    """Provide an AccountService bound to the request session."""
    return AccountService(db)


def get_paste_service(db: AsyncSession = Depends(get_db)) -> PasteService:
    """Provide a PasteService bound to the request session."""
    return PasteService(db)


CurrentAccount = Annotated[Account, Depends(get_current_account)]
OptionalAccount = Annotated[Account | None, Depends(get_optional_account)]
AdminAccount = Annotated[Account, Depends(require_admin)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
PasteServiceDep = Annotated[PasteService, Depends(get_paste_service)]
Pagination = Annotated[PaginationParams, Depends(get_pagination)]
