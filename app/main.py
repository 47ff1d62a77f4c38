"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware, exception handlers and the storage lifecycle.
"""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import api_router
from app.api import schemas
from app.core.config import settings
from app.core.logging import setup_logging
from app.middleware.logging import RequestLoggingMiddleware
from app.repositories.base import StorageInitializationError
from app.repositories.url_repository import init_storage

# Setup logging
logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the storage on startup and release it on shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    try:
        app.state.url_repository = await init_storage()
    except StorageInitializationError as e:
        logger.opt(exception=e).critical("Failed to init storage")
        raise

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")
        await app.state.url_repository.dispose()
        app.state.url_repository = None


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(RequestLoggingMiddleware)

# Include API router
app.include_router(api_router)


# Add exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=schemas.Response.fail(str(exc.detail)).model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed information."""
    logger.warning(f"Request validation error on {request.method} {request.url.path}")
    body = schemas.ValidationErrorResponse(
        status=schemas.ResponseStatus.ERROR,
        error="invalid request",
        errors=jsonable_encoder(exc.errors()),
    )
    return JSONResponse(status_code=422, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    error_id = f"error-{time.time()}"

    # Log detailed exception information with traceback
    logger.opt(exception=exc).bind(
        error_id=error_id,
        method=request.method,
        path=request.url.path,
    ).error("Unhandled exception")

    return JSONResponse(
        status_code=500,
        content=schemas.Response.fail("internal error").model_dump(mode="json"),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, log_config=None)
