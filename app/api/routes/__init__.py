"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from app.api.routes import health, redirect, url
from app.core.config import settings

# Create root router
api_router = APIRouter()

# Alias management routes
api_router.include_router(url.router)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Include redirect routes at the root path (no prefix)
# This makes aliases available directly at /{alias}
api_router.include_router(
    redirect.router
)

__all__ = ["api_router"]
