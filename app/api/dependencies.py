"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the storage created at application startup.
"""

from fastapi import HTTPException, Request, status

from app.repositories.url_repository import URLRepository


async def get_url_repository(request: Request) -> URLRepository:
    """Get the URL repository opened during application startup."""
    repository = getattr(request.app.state, "url_repository", None)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="storage is not initialized",
        )
    return repository


def validate_alias(alias: str) -> str:
    """Reject aliases that are empty once whitespace is stripped."""
    if not alias.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid request",
        )
    return alias
