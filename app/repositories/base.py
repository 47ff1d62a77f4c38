"""Base repository implementation for the URL shortener application.

This module provides the repository error vocabulary and a generic
BaseRepository class that concrete repositories build on. Repositories
receive their session factory at construction time and open one short
session per operation.
"""

from typing import Any, Generic, Optional, Type, TypeVar
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

# Type variable for model types
T = TypeVar("T", bound=SQLModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class StorageInitializationError(RepositoryError):
    """Exception raised when the storage location or schema cannot be prepared."""

    def __init__(self, location: Optional[str], reason: Any):
        self.location = location
        self.reason = reason
        super().__init__(f"cannot initialize storage at {location!r}: {reason}")


class EntityNotFoundError(RepositoryError):
    """Exception raised when an entity cannot be found."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value!r} not found")


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value!r} already exists")


class StorageFailureError(RepositoryError):
    """Exception raised for any engine failure that has no dedicated class.

    ``op`` names the repository operation that failed. The engine exception,
    when there is one, is chained as ``__cause__`` by the raiser.
    """

    def __init__(self, op: str, reason: Any):
        self.op = op
        self.reason = reason
        super().__init__(f"{op}: {reason}")


class BaseRepository(Generic[T]):
    """
    Base repository for SQLModel entities.

    Type parameters:
        T: The SQLModel type this repository manages
    """

    def __init__(self, model_type: Type[T], session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize the repository with a model type and a session factory.

        Args:
            model_type: The SQLModel class this repository will work with
            session_factory: Factory bound to the engine holding the table
        """
        self.model_type = model_type
        self.session_factory = session_factory

    async def count(self) -> int:
        """
        Count the total number of entities.

        Raises:
            StorageFailureError: On database errors
        """
        try:
            async with self.session_factory() as db:
                query = select(func.count()).select_from(self.model_type)
                result = await db.execute(query)
                return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model_type.__name__} records: {e}")
            raise StorageFailureError(f"{self.model_type.__name__}.count", e) from e
