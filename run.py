"""Entry point for the Service Directory API.

Launches the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example under Docker, where you
only specify a single Python file to run.

Configuration (database path, Stripe key, secret key, ...) is read
from environment variables; see ``service_directory_api/app/core/config.py``.
Host and port come from ``API_HOST`` and ``API_PORT`` (defaults
``0.0.0.0`` and ``5000``).

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from service_directory_api.app.main import app


async def run_api() -> None:
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "5000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
