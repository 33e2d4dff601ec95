"""
ASGI Entry Point for the notification dashboard API.

Environment variables are loaded from `.env` before the application factory
runs so that `UTTS_CONFIG_DIR` and friends are visible to settings.

Usage
-----
Run via the CLI:
    $ utts-notifications serve

Or via uvicorn directly:
    $ uvicorn utts.api.server:app --port 8765
"""

from __future__ import annotations

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from utts.api.app import create_app
from utts.core.settings import get_logger, load_settings

load_dotenv(dotenv_path=Path(".env"))

app = create_app()


def run(host: str | None = None, port: int | None = None) -> None:
    """Serve the dashboard API in the foreground."""
    settings = load_settings()
    logger = get_logger("utts")
    bind_host = host or settings.api_host
    bind_port = port or settings.api_port
    logger.info(
        "Serving notifications from %s on http://%s:%d",
        settings.notifications_file,
        bind_host,
        bind_port,
    )
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=settings.log_level.lower())


def main() -> None:
    run()


if __name__ == "__main__":
    main()
