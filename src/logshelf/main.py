"""
Main FastAPI application entry point.

This module sets up the FastAPI app with all middleware, routes, and lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import healthz_router, logs_router, metrics_router, storage_router
from .config import Settings, get_settings
from .core.accountant import StorageAccountant
from .core.eviction import EvictionHandler
from .core.exceptions import LogShelfException
from .core.file_store import FileStore
from .core.ingest import LogIngestHandler
from .core.metrics import MetricsCollector
from .core.query import LogQueryHandler


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structured logging for the application."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
    )

    # Silence the verbose watchfiles logger
    logging.getLogger("watchfiles").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def create_lifespan_handler(settings: Settings) -> Any:
    """Create a lifespan handler with access to settings."""
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        FastAPI lifespan context manager.

        Builds the store and handlers; a storage directory that cannot be
        created aborts startup.
        """
        logger = structlog.get_logger(__name__)
        logger.info("Starting LogShelf service", version=app.version)

        storage = settings.storage
        store = FileStore(storage.root_path)
        store.ensure_root()

        metrics_collector = MetricsCollector()
        accountant = StorageAccountant(
            store,
            quota_bytes=storage.quota_bytes,
            extension=storage.log_extension,
        )
        query_handler = LogQueryHandler(store, extension=storage.log_extension)

        app.state.metrics = metrics_collector
        app.state.store = store
        app.state.accountant = accountant
        app.state.query_handler = query_handler
        app.state.ingest_handler = LogIngestHandler(
            store,
            accountant,
            min_free_bytes=storage.min_free_bytes,
            extension=storage.log_extension,
            metrics=metrics_collector,
        )
        app.state.eviction_handler = EvictionHandler(query_handler, metrics=metrics_collector)

        logger.info(
            "Logs will be saved to storage directory",
            root=str(store.root.resolve()),
            quota_bytes=storage.quota_bytes,
            min_free_bytes=storage.min_free_bytes,
        )

        try:
            yield
        finally:
            logger.info("LogShelf service shutdown complete")

    return lifespan


def _error_response(exc: LogShelfException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.error_code,
            "message": str(exc),
            "details": exc.details,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as {success: false, error, message, details}."""

    @app.exception_handler(LogShelfException)
    async def logshelf_exception_handler(request: Request, exc: LogShelfException) -> JSONResponse:
        """Handle custom LogShelf exceptions."""
        logger = structlog.get_logger(__name__)
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "LogShelf exception occurred",
            error=str(exc),
            status_code=exc.status_code,
            path=request.url.path,
            method=request.method,
        )
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report malformed requests as client errors."""
        logger = structlog.get_logger(__name__)
        logger.warning(
            "Request validation failed",
            path=request.url.path,
            method=request.method,
            errors=len(exc.errors()),
        )
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "validation_error",
                "message": "Invalid request",
                "details": {"errors": [
                    {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                    for error in exc.errors()
                ]},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger = structlog.get_logger(__name__)
        logger.error(
            "Unexpected exception occurred",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
            },
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests pass their own settings; everything else reads the cached
    environment/config.yaml settings.
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)

    app = FastAPI(
        title="LogShelf",
        description="Client log collection with quota-bounded file storage",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=create_lifespan_handler(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(logs_router, prefix="/api", tags=["logs"])
    app.include_router(storage_router, prefix="/api", tags=["storage"])
    app.include_router(healthz_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])

    @app.get("/", include_in_schema=False)
    async def root() -> Dict[str, str]:
        """Root endpoint with service information."""
        return {
            "service": "LogShelf",
            "version": app.version,
            "description": "Client log collection with quota-bounded file storage",
            "docs": "/docs",
        }

    return app


# Create the app instance
app = create_app()


def run() -> None:
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        f"{__package__}.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
