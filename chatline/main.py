"""Main application entry point.

Runs FastAPI with NiceGUI mounted for the chat interface on one server.
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
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI handles the API routes, NiceGUI serves the chat page at ``/``.
    Clients are built once here and injected into both.
    """
    import uvicorn
    from nicegui import ui

    from chatline.api.app import create_app
    from chatline.config import get_settings
    from chatline.services import build_services
    from chatline.ui.chat_page import register_chat_page
    from chatline.ui.client import ChatApiClient

    settings = get_settings()
    services = build_services(settings)
    app = create_app(settings, services)
    register_chat_page(services.store, ChatApiClient(settings.api_base_url))

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="Chatline",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chatline-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Chatline on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
