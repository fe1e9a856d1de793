"""FastAPI application for the condominium administration console."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.admin import router as admin_router
from src.api.errors import register_error_handlers
from src.services import init_db
from src.services.backend_client import BackendClient
from src.services.config import Settings, get_settings
from src.services.notification_service import NotificationCenter

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    backend_client: BackendClient | None = None,
    notifications: NotificationCenter | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (defaults to the environment)
        backend_client: Pre-built client, e.g. with a mock transport in tests
        notifications: Pre-built notification queue

    A client passed in is owned by the caller and is not closed on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        init_db()
        owns_client = getattr(app.state, "backend_client", None) is None
        if owns_client:
            app.state.backend_client = BackendClient.from_settings(settings)
        if getattr(app.state, "notifications", None) is None:
            app.state.notifications = NotificationCenter(ttl_seconds=settings.notification_ttl_seconds)
        logger.info("Admin API started, backend at %s", settings.backend_url)
        try:
            yield
        finally:
            if owns_client:
                await app.state.backend_client.aclose()
                app.state.backend_client = None
            logger.info("Admin API stopped")

    app = FastAPI(
        title=settings.api_title,
        description="Condominium administration console API",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.backend_client = backend_client
    app.state.notifications = notifications

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(admin_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint for monitoring."""
        return {"status": "ok"}

    return app


app = create_app()
