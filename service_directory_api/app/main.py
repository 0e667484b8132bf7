"""
Main entrypoint for the Service Directory API.

This module assembles the FastAPI application, sets up logging, CORS
and the versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn service_directory_api.app.main:app --reload

Rendered invoice PDFs are served from ``/invoices``.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .services.invoice_pdf import get_invoices_dir
from .services.seed_service import seed_database


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Logging is initialised first so that everything below can log.
    The database is migrated (and optionally seeded) on startup rather
    than at import time.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/api/v1")
    app.mount("/invoices", StaticFiles(directory=get_invoices_dir(), check_dir=False), name="invoices")

    @app.get("/", tags=["health"])
    async def root() -> dict:
        return {"message": "ServiceDir Backend is Running!"}

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()
        if settings.seed_database:
            seed_database()
        logging.getLogger(__name__).info("%s %s started", settings.project_name, settings.api_version)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
