"""URL shortener data models.

This module defines the URL model that maps an alias to its target address.
"""
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class URLBase(SQLModel):
    """Base model for alias-to-URL data."""

    alias: str = Field(
        nullable=False,
        unique=True,
        description="Unique alias the URL is published under",
    )
    url: str = Field(
        nullable=False,
        description="The target (long) URL",
    )


class URL(URLBase, table=True):
    """
    Persisted alias-to-URL mapping.

    ``id`` is assigned by the engine and only used for bookkeeping; lookups
    and deletes always go through ``alias``. Records are never updated in
    place.
    """

    __tablename__ = "url"

    id: Optional[int] = Field(default=None, primary_key=True)

    __table_args__ = (
        # Explicit lookup index alongside the unique constraint
        Index("idx_aliases", "alias"),
    )
