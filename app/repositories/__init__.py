"""Repository layer for the URL shortener application.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from app.repositories.base import (
    BaseRepository,
    RepositoryError,
    StorageInitializationError,
    EntityNotFoundError,
    DuplicateEntityError,
    StorageFailureError,
)
from app.repositories.errors import ErrorKind, classify_error
from app.repositories.url_repository import URLRepository, init_storage

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "RepositoryError",
    "StorageInitializationError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "StorageFailureError",

    # Engine error classification
    "ErrorKind",
    "classify_error",

    # Concrete repositories
    "URLRepository",
    "init_storage",
]
