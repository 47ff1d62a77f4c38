"""Database base configuration for SQLAlchemy with SQLModel.

This module provides base database configuration for async SQLAlchemy with SQLModel.
It includes:
- Engine configuration per backend
- Session factory construction
- Schema creation
- Health check functionality
"""

from typing import Any, Dict, Optional
import asyncio
import logging
import os

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from app.core.config import EnvironmentType, build_database_uri, settings

# Register table models with SQLModel metadata
from app.models.url import URL  # noqa: F401

logger = logging.getLogger(__name__)

# Execution option marking a transaction that will write
SQLITE_IMMEDIATE = "sqlite_immediate"
WRITE_OPTIONS = {SQLITE_IMMEDIATE: True}


def get_engine_config(database_uri: str) -> Dict[str, Any]:
    """Get engine keyword arguments for the backend behind ``database_uri``.

    SQLite gets a busy timeout so concurrent writers wait on the engine's lock
    instead of failing immediately; PostgreSQL gets the configured pool.
    """
    url = make_url(database_uri)
    config: Dict[str, Any] = {"echo": settings.DB_ECHO}

    if url.get_backend_name() == "sqlite":
        config["connect_args"] = {"timeout": settings.DB_CONNECT_TIMEOUT}
        return config

    if url.get_driver_name() == "asyncpg":
        config["connect_args"] = {"timeout": settings.DB_CONNECT_TIMEOUT}

    if settings.ENVIRONMENT == EnvironmentType.TESTING:
        # Use NullPool for tests to avoid connections outliving the event loop
        config["poolclass"] = NullPool
        return config

    config.update(
        pool_size=settings.POSTGRES_POOL_SIZE,
        max_overflow=settings.POSTGRES_POOL_MAX_OVERFLOW,
        pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
        pool_recycle=settings.POSTGRES_POOL_RECYCLE,
        pool_pre_ping=True,
    )
    return config


def ensure_sqlite_directory(database_uri: str) -> None:
    """Create the parent directory of an SQLite database file if missing."""
    url = make_url(database_uri)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)


def get_engine(location: Optional[str] = None) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Args:
        location: SQLite path or SQLAlchemy URL. Defaults to the configured
            ``SQLALCHEMY_DATABASE_URI``.

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    if location is None:
        engine_url = settings.SQLALCHEMY_DATABASE_URI
    else:
        engine_url = build_database_uri(location)

    logger.info(
        "Creating database engine with URL: %s",
        make_url(engine_url).render_as_string(hide_password=True),
    )

    engine = create_async_engine(engine_url, **get_engine_config(engine_url))
    if engine.dialect.name == "sqlite":
        use_immediate_transactions(engine)
    return engine


def use_immediate_transactions(engine: AsyncEngine) -> None:
    """Let SQLite write transactions take the write lock when they begin.

    With the driver's deferred BEGIN, a transaction that has already read and
    then needs to write can get SQLITE_BUSY without the busy timeout being
    honoured. Connections carrying the ``sqlite_immediate`` execution option
    (see ``WRITE_OPTIONS``) start with BEGIN IMMEDIATE and queue on the
    engine's lock; all other transactions keep the deferred BEGIN, so reads
    run alongside a writer.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get(SQLITE_IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build the session factory that store operations draw sessions from."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create the ``url`` table and its index if they do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def open_engine(location: Optional[str] = None) -> AsyncEngine:
    """Open the storage at ``location`` and make sure the schema is in place.

    Safe to call against an already-initialized location. The engine is
    disposed again if the schema cannot be created.
    """
    ensure_sqlite_directory(
        settings.SQLALCHEMY_DATABASE_URI if location is None else build_database_uri(location)
    )
    engine = get_engine(location)
    try:
        await create_schema(engine)
    except BaseException:
        await engine.dispose()
        raise
    return engine


class DatabaseHealthCheck:
    """Health check functionality for the database connection."""

    @staticmethod
    async def check_connection(session_factory: async_sessionmaker[AsyncSession]) -> Dict:
        """Check database connectivity and return status.

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message = None
        latency_ms = 0

        try:
            async with session_factory() as session:
                await session.execute(text("SELECT 1"))
            latency_ms = int((loop.time() - start_time) * 1000)
        except SQLAlchemyError as e:
            status = "unhealthy"
            error_message = str(e)
            logger.error("Database health check failed: %s", e)

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }
