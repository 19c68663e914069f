"""Service layer holding the business rules."""

from pasteit.services.account_service import AccountService
from pasteit.services.paste_service import PasteService

__all__ = ["AccountService", "PasteService"]
