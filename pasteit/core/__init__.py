"""
Core module for PasteIt.

Exports the main configuration, database, security, and logging components.
"""

from pasteit.core.config import settings
from pasteit.core.database import check_database_connection

__all__ = [
    # Config
    "settings",
    # Database
    "check_database_connection",
]
