"""Database module for the URL shortener application."""
from app.db.base import (
    DatabaseHealthCheck,
    create_schema,
    get_engine,
    get_session_factory,
    open_engine,
)

__all__ = [
    "DatabaseHealthCheck",
    "create_schema",
    "get_engine",
    "get_session_factory",
    "open_engine",
]
