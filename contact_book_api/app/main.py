"""
Main entrypoint for the Contact Book API.

This module assembles the FastAPI application, sets up logging, opens
the contact store and includes versioned routers.  The ``create_app``
function builds and configures the app, which is then instantiated at
module import time as ``app``, e.g.::

    uvicorn contact_book_api.app.main:app --reload

The store is opened in the lifespan handler, so importing this module
does not touch the database.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.clock import SystemClock
from .core.config import Settings, settings as default_settings
from .core.errors import ContactBookError, StorageError
from .core.logging_config import setup_logging
from .core.store import ContactStore
from .services.contact_service import ContactService

logger = logging.getLogger(__name__)


async def contact_book_error_handler(request: Request, exc: ContactBookError) -> JSONResponse:
    """Render a service error as ``{"detail": ..., "error": ...}``."""
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
        headers=exc.headers(),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module‑level settings
        read from the environment; tests pass their own instance.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Applies pending migrations and creates the database file if needed.
        store = ContactStore(
            settings.database_url,
            max_key_size=settings.max_key_size,
            max_value_size=settings.max_value_size,
        )
        app.state.contact_service = ContactService(
            store,
            clock=SystemClock(),
            list_scope=settings.contact_list_scope,
            strict_field_updates=settings.strict_field_updates,
        )
        logger.info("Contact store ready at %s (%d records)", store.db_path, len(store))
        yield
        logger.info("Shutting down %s", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_exception_handler(ContactBookError, contact_book_error_handler)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
