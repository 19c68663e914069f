"""
Database models for PasteIt.

This module exports all SQLAlchemy models and the declarative base.
Import models from this module to ensure proper initialization.
"""

from pasteit.models.account import Account, default_preferences
from pasteit.models.base import Base
from pasteit.models.enums import Role, Visibility
from pasteit.models.mixins import CreatedAtMixin, SoftDeleteMixin
from pasteit.models.paste import Paste

__all__ = [
    "Base",
    "CreatedAtMixin",
    "SoftDeleteMixin",
    "Account",
    "default_preferences",
    "Paste",
    "Role",
    "Visibility",
]
