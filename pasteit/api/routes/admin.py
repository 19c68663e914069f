"""
Admin API routes.
"""

import logging

from fastapi import APIRouter

from pasteit.api.dependencies import AdminAccount, PasteServiceDep
from pasteit.schemas.paste import SweepResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/pastes/sweep",
    response_model=SweepResponse,
    summary="Run the expiry sweep",
    description="Flag every paste past its expiry as deleted. Idempotent.",
)
async def sweep_expired_pastes(
    admin: AdminAccount,
    paste_service: PasteServiceDep,
) -> SweepResponse:
    swept = await paste_service.sweep_expired()
    logger.info(f"Expiry sweep triggered by admin {admin.id}: {swept} paste(s)")
    return SweepResponse(swept=swept)
