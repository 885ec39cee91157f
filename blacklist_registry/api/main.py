"""FastAPI application entry point."""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blacklist_registry.api.dependencies import cleanup, get_store
from blacklist_registry.api.routes import admin_router, entries_router, listing_router
from blacklist_registry.config import get_settings
from blacklist_registry.exceptions import (
    DuplicatePosition,
    EntryNotFound,
    SchemaViolation,
    StoreUnavailable,
    UnsupportedProtocolVersion,
)
from blacklist_registry.strings import get_string

API_VERSION = "1.0.0"


def configure_logging() -> None:
    """Configure logging based on environment variables.

    Environment variables:
        LOG_LEVEL: Set the logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        LOG_FORMAT: Set the log format (simple, detailed). Default: detailed
    """
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("LOG_FORMAT", "detailed")

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    level = level_map.get(log_level, logging.INFO)

    if log_format == "simple":
        format_str = "%(levelname)s: %(message)s"
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=level, format=format_str, stream=sys.stdout)
    logging.getLogger("blacklist_registry").setLevel(level)

    # Reduce noise from third-party libraries unless DEBUG
    if level > logging.DEBUG:
        logging.getLogger("pymongo").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    logger.info("Starting registry API...")
    await get_store()
    yield
    logger.info("Shutting down registry API...")
    await cleanup()


def _error(status_code: int, detail: str, error_code: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error_code": error_code, "errors": errors or []},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Blacklist Registry API",
        description="Ordered public registry with redaction-aware rendering",
        version=API_VERSION,
        lifespan=lifespan,
    )

    allowed_origins = get_settings().allowed_origins.split(",")
    logger.debug(f"Configuring CORS with allowed origins: {allowed_origins}")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "HX-Request"],
    )

    application.include_router(entries_router, prefix="/entries", tags=["Entries"])
    application.include_router(listing_router, tags=["Listing"])
    application.include_router(admin_router, prefix="/admin", tags=["Admin"])

    # Exception handlers
    @application.exception_handler(SchemaViolation)
    async def schema_violation_handler(request: Request, exc: SchemaViolation) -> JSONResponse:
        logger.warning(f"Schema violation on {request.method} {request.url.path}: {exc}")
        return _error(400, str(exc), "SCHEMA_VIOLATION", exc.to_list())

    @application.exception_handler(UnsupportedProtocolVersion)
    async def protocol_handler(request: Request, exc: UnsupportedProtocolVersion) -> JSONResponse:
        logger.warning(f"Unsupported protocol on {request.url.path}: {exc.value!r}")
        return _error(400, str(exc), "UNSUPPORTED_PROTOCOL_VERSION")

    @application.exception_handler(EntryNotFound)
    async def not_found_handler(request: Request, exc: EntryNotFound) -> JSONResponse:
        logger.debug(f"Not found on {request.method} {request.url.path}: {exc}")
        return _error(404, str(exc), "NOT_FOUND")

    @application.exception_handler(DuplicatePosition)
    async def duplicate_handler(request: Request, exc: DuplicatePosition) -> JSONResponse:
        # On a read this is an integrity fault in stored data, on a write a conflict.
        if request.method == "GET":
            logger.error(f"Integrity fault on {request.url.path}: {exc}")
            return _error(500, get_string("errors.integrity", str(exc)), "DUPLICATE_POSITION")
        logger.warning(f"Write conflict on {request.url.path}: {exc}")
        return _error(409, str(exc), "DUPLICATE_POSITION")

    @application.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
        logger.error(f"Store unavailable on {request.method} {request.url.path}: {exc}")
        return _error(503, get_string("errors.storeUnavailable", str(exc)), "STORE_UNAVAILABLE")

    @application.get("/health")
    async def health_check():
        return {"status": "healthy", "version": API_VERSION}

    return application


app = create_app()
