"""FastAPI host application for the chat UI.

Serves the avatar assets probed by the session (``/avatars``) and the local
image cache (``/image-cache``) next to a health endpoint. NiceGUI is mounted
onto this app by companion.main.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from companion import __version__
from companion.config import ClientConfig, get_client_config

logger = logging.getLogger(__name__)

AVATAR_ROUTE = "/avatars"
IMAGE_CACHE_ROUTE = "/image-cache"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log application startup and shutdown."""
    logger.info("Starting Companion Chat...")
    yield
    logger.info("Shutting down Companion Chat...")


def create_app(config: ClientConfig | None = None) -> FastAPI:
    """Create and configure the host application.

    Args:
        config: Optional client configuration; loaded once if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or get_client_config()

    application = FastAPI(
        title="Companion Chat",
        description="Chat client for the companion conversation service.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    config.avatar_dir.mkdir(parents=True, exist_ok=True)
    config.image_cache_dir.mkdir(parents=True, exist_ok=True)

    application.mount(
        AVATAR_ROUTE,
        StaticFiles(directory=config.avatar_dir),
        name="avatars",
    )
    application.mount(
        IMAGE_CACHE_ROUTE,
        StaticFiles(directory=config.image_cache_dir),
        name="image-cache",
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "companion-chat"}

    return application
