"""FastAPI application factory and lifespan management."""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import get_settings, init_services, shutdown_services
from src.api.middleware.error_handler import error_handler_middleware
from src.api.middleware.logging import LoggingMiddleware
from src.api.openapi.routes import content, health, tokens, uploads
from src.commons.settings.models import Settings
from src.commons.telemetry import JsonFormatter, TextFormatter, configure_logging

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _log_level(settings: Settings) -> str:
    return (settings.telemetry.log_level or settings.app.log_level).upper()


def _setup_logging() -> None:
    """Configure logging for the application.

    Runs at import time so our formatters are in place before uvicorn
    starts.
    """
    settings = get_settings()
    level = _log_level(settings)

    configure_logging(
        level=level,
        format_type=settings.telemetry.log_format,
        logger_name="src",
    )
    logging.getLogger().setLevel(getattr(logging, level))


def _configure_uvicorn_logging() -> None:
    """Point uvicorn's loggers at our formatter.

    Called during lifespan, once uvicorn has installed its handlers.
    """
    settings = get_settings()
    level = getattr(logging, _log_level(settings))
    formatter: logging.Formatter = (
        JsonFormatter() if settings.telemetry.log_format == "json" else TextFormatter()
    )

    for name in _UVICORN_LOGGERS:
        uv_logger = logging.getLogger(name)
        uv_logger.setLevel(level)
        if not uv_logger.handlers:
            uv_logger.addHandler(logging.StreamHandler(sys.stdout))
            uv_logger.propagate = False
        for handler in uv_logger.handlers:
            handler.setFormatter(formatter)
            handler.setLevel(level)


_setup_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown.

    Initializes infrastructure services on startup and closes provider
    and database clients on exit.
    """
    _configure_uvicorn_logging()

    await init_services(get_settings())

    yield

    await shutdown_services()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description=(
            "Direct-to-provider video uploads for user-generated content, "
            "with status polling and content bindings"
        ),
        docs_url="/docs" if settings.server.docs_enabled else None,
        redoc_url="/redoc" if settings.server.docs_enabled else None,
        openapi_url="/openapi.json" if settings.server.docs_enabled else None,
        lifespan=lifespan,
    )

    _configure_middleware(app, settings)
    _register_routes(app, settings)

    return app


def _configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware, user_header=settings.security.user_header)

    # Outermost, so it also sees errors raised by the other middleware
    app.middleware("http")(error_handler_middleware)


def _register_routes(app: FastAPI, settings: Settings) -> None:
    """Register API routes."""
    prefix = settings.server.api_prefix

    # Health routes (no prefix for standard health checks)
    app.include_router(health.router, tags=["Health"])

    app.include_router(tokens.router, prefix=prefix, tags=["Tokens"])
    app.include_router(uploads.router, prefix=prefix, tags=["Uploads"])
    app.include_router(content.router, prefix=prefix, tags=["Content"])


# Create default app instance
app = create_app()
