"""Main application entry point.

Runs the FastAPI host app (port 8000) with the NiceGUI chat page mounted on it.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the chat UI and its asset routes on one server."""
    import uvicorn
    from nicegui import ui

    from companion.app import create_app
    from companion.config import get_client_config
    from companion.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_client_config()
    app = create_app(config)

    ui.run_with(
        app,
        title="Companion",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "companion-chat-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Companion Chat on http://localhost:{port}")
    logger.info(f"Conversation service: {config.server_url}")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
