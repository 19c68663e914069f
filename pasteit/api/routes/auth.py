"""
Authentication API routes.

This module provides REST endpoints for:
- Account registration
- Login
- Reading and updating the current account
- Password change
"""

import logging

from fastapi import APIRouter, Request, status

from pasteit.api.dependencies import AccountServiceDep, CurrentAccount
from pasteit.core.config import settings
from pasteit.core.rate_limit import limiter
from pasteit.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    AuthResponse,
    LoginRequest,
    PasswordChange,
)
from pasteit.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="""
    Register a new account with username, email and password.

    **Password Requirements:** at least PASSWORD_MIN_LENGTH characters (default 8)

    **Rate Limit:** Configurable via RATE_LIMIT_REGISTER (default: 3/hour)

    Returns the created account and a session token valid for 7 days.
    """,
)
@limiter.limit(settings.rate_limit_register)
async def register(
    account_data: AccountCreate,
    request: Request,
    account_service: AccountServiceDep,
) -> AuthResponse:
    account, token = await account_service.register(
        username=account_data.username,
        email=account_data.email,
        password=account_data.password,
    )
    return AuthResponse(account=account, token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a session token.

    **Rate Limit:** Configurable via RATE_LIMIT_LOGIN (default: 5/15minute)
    """,
)
@limiter.limit(settings.rate_limit_login)
async def login(
    credentials: LoginRequest,
    request: Request,
    account_service: AccountServiceDep,
) -> AuthResponse:
    account, token = await account_service.login(
        email=credentials.email,
        password=credentials.password,
    )
    return AuthResponse(account=account, token=token)


@router.get(
    "/me",
    response_model=AccountResponse,
    summary="Get the current account",
)
async def get_me(
    current_account: CurrentAccount,
    account_service: AccountServiceDep,
) -> AccountResponse:
    return await account_service.get_by_id(current_account.id)


@router.put(
    "/me",
    response_model=AccountResponse,
    summary="Update the current account",
    description="""
    Update email, password, preferences or active flag.

    Attempts to change id, username, role or created_at are rejected with 400.
    """,
)
async def update_me(
    updates: AccountUpdate,
    current_account: CurrentAccount,
    account_service: AccountServiceDep,
) -> AccountResponse:
    changes = updates.model_dump(exclude_unset=True, mode="json")
    changes.update(updates.model_extra or {})
    await account_service.update(current_account.id, changes)
    return await account_service.get_by_id(current_account.id)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
    description="""
    Change the current account's password. The current password is required.

    **Rate Limit:** Configurable via RATE_LIMIT_PASSWORD_CHANGE (default: 3/hour)
    """,
)
@limiter.limit(settings.rate_limit_password_change)
async def change_password(
    password_data: PasswordChange,
    request: Request,
    current_account: CurrentAccount,
    account_service: AccountServiceDep,
) -> MessageResponse:
    await account_service.change_password(
        current_account.id,
        current_password=password_data.current_password,
        new_password=password_data.new_password,
    )
    return MessageResponse(message="Password changed successfully", success=True)
