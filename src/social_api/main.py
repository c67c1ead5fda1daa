"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from social_api import __version__
from social_api.api import api_router
from social_api.config import get_settings
from social_api.database import create_engine, create_schema, create_session_factory
from social_api.store import (
    ConflictError,
    NotFoundError,
    SelfFollowError,
    Storage,
    StoreError,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - runs on startup and shutdown."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, __version__)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Database: %s", settings.database_url.split("@")[-1].split("///")[-1])
    logger.info("Mail: %s", "configured" if settings.sendgrid_api_key else "NOT CONFIGURED")

    # Validate and log warnings
    warnings = settings.validate_runtime_config()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)
    else:
        logger.info("Configuration validation passed - no warnings")

    engine = create_engine(settings)
    if settings.auto_create_schema:
        logger.info("Creating database schema from models")
        await create_schema(engine)
    app.state.storage = Storage(create_session_factory(engine), settings.storage_config())

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutting down")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(NotFoundError)
async def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle NotFoundError exceptions globally."""
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc) or "Resource not found"},
    )


@app.exception_handler(ConflictError)
async def conflict_error_handler(_request: Request, exc: ConflictError) -> JSONResponse:
    """Handle ConflictError (duplicates, stale versions) globally."""
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc) or "Resource already exists"},
    )


@app.exception_handler(SelfFollowError)
async def self_follow_error_handler(_request: Request, exc: SelfFollowError) -> JSONResponse:
    """Handle SelfFollowError exceptions globally."""
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Handle InternalError and any other storage failure globally."""
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "The server encountered a problem"},
    )


# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the API is running."""
    return {"status": "healthy", "version": __version__}
