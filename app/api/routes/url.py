"""Endpoints for publishing and removing aliases."""

from fastapi import APIRouter, Depends, HTTPException, Path, status
from loguru import logger

from app.api import schemas
from app.api.dependencies import get_url_repository, validate_alias
from app.repositories.base import DuplicateEntityError, EntityNotFoundError, StorageFailureError
from app.repositories.url_repository import URLRepository

router = APIRouter(prefix="/url", tags=["url"])


@router.post(
    "",
    response_model=schemas.SaveURLResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": schemas.Response, "description": "Alias already exists"},
        422: {"model": schemas.ValidationErrorResponse, "description": "Invalid request body"},
        500: {"model": schemas.Response, "description": "Storage failure"},
    },
)
async def save_url(
    request_data: schemas.SaveURLRequest,
    url_repository: URLRepository = Depends(get_url_repository),
):
    log = logger.bind(op="handlers.url.save", alias=request_data.alias)
    url = request_data.url

    try:
        record_id = await url_repository.save_url(url, request_data.alias)
    except DuplicateEntityError:
        log.info("url already exists")
        raise HTTPException(status_code=409, detail="url already exists")
    except StorageFailureError as e:
        log.opt(exception=e).error("failed to add url")
        raise HTTPException(status_code=500, detail="failed to add url")

    log.bind(id=record_id).info("url added")
    return schemas.SaveURLResponse(
        status=schemas.ResponseStatus.OK,
        alias=request_data.alias,
        id=record_id,
    )


@router.delete(
    "/{alias}",
    response_model=schemas.Response,
    response_model_exclude_none=True,
    responses={
        400: {"model": schemas.Response, "description": "Empty alias"},
        404: {"model": schemas.Response, "description": "Alias not found"},
        500: {"model": schemas.Response, "description": "Storage failure"},
    },
)
async def delete_url(
    alias: str = Path(..., description="The alias to remove"),
    url_repository: URLRepository = Depends(get_url_repository),
):
    log = logger.bind(op="handlers.url.delete", alias=alias)
    validate_alias(alias)

    try:
        await url_repository.delete_url(alias)
    except EntityNotFoundError:
        log.warning("url not found")
        raise HTTPException(status_code=404, detail="not found")
    except StorageFailureError as e:
        log.opt(exception=e).error("failed to delete url")
        raise HTTPException(status_code=500, detail="internal error")

    log.debug("alias deleted")
    return schemas.Response.ok()


@router.delete(
    "/",
    response_model=schemas.Response,
    status_code=status.HTTP_400_BAD_REQUEST,
    include_in_schema=False,
)
async def delete_url_without_alias():
    validate_alias("")
