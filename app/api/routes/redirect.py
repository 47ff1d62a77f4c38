"""Alias redirection endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from starlette.responses import RedirectResponse

from app.api.dependencies import get_url_repository, validate_alias
from app.repositories.base import EntityNotFoundError, StorageFailureError
from app.repositories.url_repository import URLRepository

# Create router with tags
router = APIRouter(tags=["redirect"])


@router.get(
    "/{alias}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={
        404: {"description": "Alias not found"},
        500: {"description": "Storage failure"},
    },
)
async def redirect(
    alias: str,
    url_repository: URLRepository = Depends(get_url_repository),
):
    """Redirect to the URL stored under ``alias``."""
    log = logger.bind(op="handlers.redirect", alias=alias)
    validate_alias(alias)

    try:
        url = await url_repository.get_url(alias)
    except EntityNotFoundError:
        log.warning("url not found")
        raise HTTPException(status_code=404, detail="not found")
    except StorageFailureError as e:
        log.opt(exception=e).error("failed to get url")
        raise HTTPException(status_code=500, detail="internal error")

    log.bind(url=url).debug("got url")
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
