"""Repository layer for data access."""

from pasteit.repositories.account_repository import AccountRepository
from pasteit.repositories.base import BaseRepository, store_errors
from pasteit.repositories.paste_repository import PasteRepository

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "PasteRepository",
    "store_errors",
]
