"""
Paste API routes.

This module provides REST endpoints for:
- Paste creation (anonymous or owned)
- Reading pastes, with password unlock and raw text
- Owner updates and soft deletion
- Recent public pastes and search
"""

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import PlainTextResponse

from pasteit.api.dependencies import (
    CurrentAccount,
    OptionalAccount,
    Pagination,
    PasteServiceDep,
)
from pasteit.core.config import settings
from pasteit.exceptions import InvalidPasswordError, ShortIdCollisionError
from pasteit.models.account import Account
from pasteit.models.enums import Role
from pasteit.schemas.common import MessageResponse, PaginatedResponse
from pasteit.schemas.paste import PasteCreate, PasteResponse, PasteUnlock, PasteUpdate
from pasteit.services.paste_service import PasteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pastes", tags=["Pastes"])


async def _read_paste(
    paste_service: PasteService,
    short_id: str,
    account: Account | None,
    password: str | None = None,
) -> PasteResponse:
    await paste_service.ensure_readable(
        short_id,
        requester_id=account.id if account else None,
        is_admin=account is not None and account.role == Role.admin,
    )
    return await paste_service.get_by_short_id(short_id, password=password)


@router.post(
    "",
    response_model=PasteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a paste",
    description="""
    Create a paste. Anonymous callers may create public and unlisted pastes;
    private pastes require login.

    A password makes the paste protected: its content is only returned to
    readers who supply the same password.
    """,
)
async def create_paste(
    paste_data: PasteCreate,
    paste_service: PasteServiceDep,
    account: OptionalAccount,
) -> PasteResponse:
    owner_id = account.id if account else None
    attempts = settings.short_id_max_attempts

    for attempt in range(1, attempts + 1):
        try:
            return await paste_service.create(paste_data, owner_id=owner_id)
        except ShortIdCollisionError:
            if attempt == attempts:
                raise
            logger.warning(f"Short ID collision, retrying ({attempt}/{attempts})")

    raise ShortIdCollisionError()


@router.get(
    "/recent",
    response_model=PaginatedResponse[PasteResponse],
    summary="List recent public pastes",
)
async def list_recent(
    paste_service: PasteServiceDep,
    pagination: Pagination,
    syntax: str | None = Query(default=None, max_length=50),
) -> PaginatedResponse[PasteResponse]:
    return await paste_service.list_recent_public(pagination, syntax=syntax)


@router.get(
    "/search",
    response_model=PaginatedResponse[PasteResponse],
    summary="Search public pastes",
    description="Free-text search over title and content of public pastes.",
)
async def search_pastes(
    paste_service: PasteServiceDep,
    pagination: Pagination,
    q: str | None = Query(default=None, max_length=200),
) -> PaginatedResponse[PasteResponse]:
    return await paste_service.search(q, pagination)


@router.get(
    "/{short_id}",
    response_model=PasteResponse,
    summary="Read a paste",
    description="""
    Read a paste and count a view. Protected pastes come back with empty
    content and is_protected=true; use POST with the password to unlock.
    """,
)
async def get_paste(
    short_id: str,
    paste_service: PasteServiceDep,
    account: OptionalAccount,
) -> PasteResponse:
    return await _read_paste(paste_service, short_id, account)


@router.post(
    "/{short_id}",
    response_model=PasteResponse,
    summary="Read a protected paste",
)
async def unlock_paste(
    short_id: str,
    unlock: PasteUnlock,
    paste_service: PasteServiceDep,
    account: OptionalAccount,
) -> PasteResponse:
    return await _read_paste(paste_service, short_id, account, password=unlock.password)


@router.post(
    "/{short_id}/raw",
    response_class=PlainTextResponse,
    summary="Read paste content as plain text",
)
async def raw_paste(
    short_id: str,
    paste_service: PasteServiceDep,
    account: OptionalAccount,
    unlock: PasteUnlock | None = None,
) -> PlainTextResponse:
    password = unlock.password if unlock else None
    paste = await _read_paste(paste_service, short_id, account, password=password)
    if paste.is_protected and not password:
        raise InvalidPasswordError("Password required")
    return PlainTextResponse(paste.content)


@router.put(
    "/{short_id}",
    response_model=MessageResponse,
    summary="Update a paste",
    description="""
    Update title, content, syntax, visibility, expiry, tags or password.
    Other fields are ignored. An empty or null password removes protection.
    """,
)
async def update_paste(
    short_id: str,
    updates: PasteUpdate,
    current_account: CurrentAccount,
    paste_service: PasteServiceDep,
) -> MessageResponse:
    changes = updates.model_dump(exclude_unset=True)
    changes.update(updates.model_extra or {})

    changed = await paste_service.update(short_id, current_account.id, changes)
    return MessageResponse(
        message="Paste updated successfully" if changed else "No changes applied",
        success=changed,
    )


@router.delete(
    "/{short_id}",
    response_model=MessageResponse,
    summary="Delete a paste",
)
async def delete_paste(
    short_id: str,
    current_account: CurrentAccount,
    paste_service: PasteServiceDep,
) -> MessageResponse:
    deleted = await paste_service.delete(short_id, current_account.id)
    return MessageResponse(
        message="Paste deleted successfully" if deleted else "Paste was already deleted",
        success=deleted,
    )
