"""URL Repository for the URL shortener application.

This module provides the URLRepository class, the persistent alias-to-URL
store. Every operation runs in its own session and transaction, and engine
failures are classified right after the engine call into the repository
error vocabulary.
"""

from typing import Optional
import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.db.base import WRITE_OPTIONS, get_session_factory, open_engine
from app.models.url import URL
from app.repositories.base import (
    BaseRepository,
    DuplicateEntityError,
    EntityNotFoundError,
    StorageFailureError,
    StorageInitializationError,
)
from app.repositories.errors import ErrorKind, classify_error

logger = logging.getLogger(__name__)


class URLRepository(BaseRepository[URL]):
    """
    Repository for alias-to-URL records.

    Holds no mutable state besides the injected session factory, so one
    instance can serve concurrent callers; contention is left to the engine.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        """
        Initialize the repository.

        Args:
            session_factory: Factory producing sessions bound to the storage
            engine: Engine to dispose of on ``dispose()``, when this
                repository owns it
        """
        super().__init__(URL, session_factory)
        self.engine = engine

    async def save_url(self, url: str, alias: str) -> int:
        """
        Store a new alias-to-URL mapping.

        Args:
            url: Target address
            alias: Alias to publish it under

        Returns:
            The engine-assigned record id

        Raises:
            DuplicateEntityError: If the alias is already taken
            StorageFailureError: On other database errors
        """
        op = "url_repository.save_url"
        try:
            async with self.session_factory.begin() as db:
                await db.connection(execution_options=WRITE_OPTIONS)
                record = URL(url=url, alias=alias)
                db.add(record)
                await db.flush()  # Flush to have the engine assign the id
                record_id = record.id
                if record_id is None:
                    raise StorageFailureError(op, "cannot get last insert id")
        except SQLAlchemyError as e:
            if classify_error(e) is ErrorKind.ALREADY_EXISTS:
                raise DuplicateEntityError(URL, "alias", alias) from e
            raise StorageFailureError(op, e) from e

        logger.debug(f"Saved alias {alias!r} with id {record_id}")
        return record_id

    async def get_url(self, alias: str) -> str:
        """
        Resolve an alias to its URL.

        Raises:
            EntityNotFoundError: If no record has this alias
            StorageFailureError: On database errors
        """
        try:
            async with self.session_factory() as db:
                result = await db.execute(select(URL.url).where(URL.alias == alias))
                row = result.first()
        except SQLAlchemyError as e:
            raise StorageFailureError("url_repository.get_url", e) from e

        if row is None:
            raise EntityNotFoundError(URL, "alias", alias)
        return row[0]

    async def delete_url(self, alias: str) -> None:
        """
        Remove the record published under ``alias``.

        The outcome is read from the affected-row count: zero rows means the
        alias did not exist, and a count the driver cannot report is a
        storage failure rather than a success.

        Raises:
            EntityNotFoundError: If no record has this alias
            StorageFailureError: On database errors
        """
        op = "url_repository.delete_url"
        try:
            async with self.session_factory.begin() as db:
                await db.connection(execution_options=WRITE_OPTIONS)
                stmt = (
                    delete(URL)
                    .where(URL.alias == alias)
                    .execution_options(synchronize_session=False)
                )
                result = await db.execute(stmt)
                rows_affected = result.rowcount
        except SQLAlchemyError as e:
            raise StorageFailureError(op, e) from e

        if rows_affected is None or rows_affected < 0:
            raise StorageFailureError(op, "cannot determine rows affected")
        if rows_affected == 0:
            raise EntityNotFoundError(URL, "alias", alias)

        logger.debug(f"Deleted alias {alias!r}")

    async def dispose(self) -> None:
        """Release the engine's connections if this repository owns the engine."""
        if self.engine is not None:
            await self.engine.dispose()


async def init_storage(location: Optional[str] = None) -> URLRepository:
    """
    Open or create the store at ``location`` and return a repository for it.

    ``location`` is an SQLite file path, ``:memory:``, or a full async
    SQLAlchemy URL; it defaults to the configured database. Idempotent
    against an already-initialized location.

    Raises:
        StorageInitializationError: If the location is empty or the store
            cannot be prepared there
    """
    if location is not None and not location.strip():
        raise StorageInitializationError(location, "empty storage location")

    try:
        engine = await open_engine(location)
    except (SQLAlchemyError, OSError, ImportError) as e:
        raise StorageInitializationError(location, e) from e

    logger.info("URL storage initialized")
    return URLRepository(get_session_factory(engine), engine=engine)
