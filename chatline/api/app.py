"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error rendering and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatline import __version__
from chatline.api.chat import router as chat_router
from chatline.config import Settings, get_settings
from chatline.errors import ChatlineError
from chatline.models.schemas import ErrorResponse
from chatline.services import Services, build_services

logger = logging.getLogger(__name__)


async def chatline_error_handler(request: Request, exc: ChatlineError) -> JSONResponse:
    """Render application errors as ``{"error": ..., "details": ...}``."""
    body = ErrorResponse(error=exc.error, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration. Loaded from environment if not provided.
        services: Pre-built clients. Built from ``settings`` if not provided.

    Returns:
        Configured FastAPI application instance.

    Raises:
        ConfigurationError: In production when credentials are missing.
    """
    settings = settings or get_settings()
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        # Startup
        logger.info(f"Starting Chatline API ({settings.environment.value})...")
        await services.startup(create_schema=settings.create_schema)
        yield
        # Shutdown
        logger.info("Shutting down Chatline API...")
        await services.aclose()

    application = FastAPI(
        title="Chatline API",
        description=(
            "Minimal chat backend. Streams LLM completions for a submitted "
            "conversation and persists both sides of it for later retrieval."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.services = services

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(ChatlineError, chatline_error_handler)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chatline"}

    return application
