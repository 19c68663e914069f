"""
Public account API routes.

This module provides REST endpoints for:
- Public profiles
- Listing an account's pastes
"""

import logging
import uuid

from fastapi import APIRouter, Query

from pasteit.api.dependencies import (
    AccountServiceDep,
    OptionalAccount,
    Pagination,
    PasteServiceDep,
)
from pasteit.models.enums import Role, Visibility
from pasteit.schemas.account import PublicProfile
from pasteit.schemas.common import PaginatedResponse
from pasteit.schemas.paste import PasteResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/{user_id}",
    response_model=PublicProfile,
    summary="Get a public profile",
)
async def get_profile(
    user_id: uuid.UUID,
    account_service: AccountServiceDep,
) -> PublicProfile:
    account = await account_service.get_by_id(user_id)
    return PublicProfile.model_validate(account, from_attributes=True)


@router.get(
    "/{user_id}/pastes",
    response_model=PaginatedResponse[PasteResponse],
    summary="List an account's pastes",
    description="""
    List live pastes of an account, newest first.

    The owner and admins may filter by any visibility; everyone else only
    sees public pastes.
    """,
)
async def list_user_pastes(
    user_id: uuid.UUID,
    paste_service: PasteServiceDep,
    account: OptionalAccount,
    pagination: Pagination,
    visibility: Visibility | None = Query(default=None),
) -> PaginatedResponse[PasteResponse]:
    is_owner = account is not None and account.id == user_id
    is_admin = account is not None and account.role == Role.admin
    if not (is_owner or is_admin):
        visibility = Visibility.public

    return await paste_service.list_by_owner(user_id, pagination, visibility=visibility)
