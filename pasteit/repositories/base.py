"""
Base repository with generic operations.

This module provides a generic repository pattern for database operations.
All specific repositories should inherit from BaseRepository.

Connection-level failures (``OperationalError``, ``InterfaceError``) raised
while talking to the store are translated to ``StoreUnavailableError`` here,
so services never see driver exceptions for a lost connection.

Type Parameters:
    ModelType: The SQLAlchemy model class (e.g., Account, Paste)
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import Executable, Result, select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from pasteit.exceptions import StoreUnavailableError
from pasteit.models.base import Base

logger = logging.getLogger(__name__)

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)


@asynccontextmanager
async def store_errors() -> AsyncIterator[None]:
    """Translate lost-connection errors from the driver into StoreUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Store unavailable: {e.__class__.__name__}")
        raise StoreUnavailableError() from e


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository for database operations.

    Repositories flush; services decide when a unit of work is committed.

    Type Parameters:
        ModelType: The SQLAlchemy model class

    Usage:
        class AccountRepository(BaseRepository[Account]):
            def __init__(self, session: AsyncSession):
                super().__init__(Account, session)

            async def get_by_email(self, email: str) -> Account | None:
                ...
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: The SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def _execute(self, statement: Executable, **kwargs: Any) -> Result[Any]:
        """Execute a statement, translating connection failures."""
        async with store_errors():
            return await self.session.execute(statement, **kwargs)

    async def add(self, instance: ModelType) -> ModelType:
        """
        Persist a model instance.

        Args:
            instance: Model instance to persist

        Returns:
            Persisted model instance (with ID and defaults populated)

        Raises:
            IntegrityError: On a unique constraint violation; subclasses
                translate it into a domain error
        """
        async with store_errors():
            self.session.add(instance)
            await self.session.flush()
            await self.session.refresh(instance)
        return instance

    async def get_by_id(self, id: uuid.UUID) -> ModelType | None:
        """
        Get a record by ID.

        Args:
            id: UUID of the record

        Returns:
            Model instance or None if not found
        """
        query = select(self.model).where(self.model.id == id)
        result = await self._execute(query)
        return result.scalar_one_or_none()

    async def flush(self) -> None:
        """Flush pending changes on already-loaded instances."""
        async with store_errors():
            await self.session.flush()

    async def commit(self) -> None:
        """Commit the current unit of work."""
        async with store_errors():
            await self.session.commit()

    async def rollback(self) -> None:
        """Discard the current unit of work."""
        await self.session.rollback()
