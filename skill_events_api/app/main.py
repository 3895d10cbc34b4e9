"""
Main entrypoint for the Skill Events API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Run it with uvicorn, e.g.::

    uvicorn skill_events_api.app.main:app --reload

All state lives in the ``MemoryStore`` attached to ``app.state`` and is
lost when the process exits.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import StorageUnavailable
from .core.logging_config import setup_logging
from .core.store import MemoryStore
from .api.v1.router import router as v1_router


def create_app(store: Optional[MemoryStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[MemoryStore]
        State backing the services.  A fresh empty store is created
        when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that the rest of the setup can log.
    setup_logging(settings.log_level, settings.log_file or None, settings.ledger_log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.store = store if store is not None else MemoryStore()

    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(StorageUnavailable)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
        logging.getLogger(__name__).warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": exc.message, "code": exc.code},
        )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
