"""Main application entry point.

Runs FastAPI (port 8000) with the NiceGUI chat page mounted.
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


def run_integrated() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI handles /chat, /reset and /history, NiceGUI serves the page.
    Both accessible on port 8000.
    """
    import uvicorn
    from nicegui import ui

    from gemchat.api.app import create_app
    from gemchat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    ui.run_with(
        app,
        title="My Chatbot",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "gemchat-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run FastAPI and NiceGUI as separate processes.

    FastAPI on port 8000, NiceGUI on port 8080 (talking to API_BASE_URL).
    """
    import subprocess

    logger.info("Starting FastAPI on http://localhost:8000")
    logger.info("Starting NiceGUI on http://localhost:8080")

    api_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "gemchat.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            "8000",
        ]
    )
    ui_proc = subprocess.Popen(
        [sys.executable, "-c", "from gemchat.ui.chat_page import main; main()"]
    )

    try:
        api_proc.wait()
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in (api_proc, ui_proc):
            proc.terminate()
            proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run FastAPI and NiceGUI on different ports.
    Default is integrated mode (both on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting gemchat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
