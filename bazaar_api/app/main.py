"""
Main entrypoint for the Bazaar Ramadhan API.

This module assembles the FastAPI application, sets up logging and
includes the API router under ``/api``.  ``create_app`` builds and
configures the app, which is then instantiated at module import time as
``app``, e.g.::

    uvicorn bazaar_api.app.main:app --reload

``SECRET_KEY`` must be present in the environment before import;
``create_app`` refuses to build an application without it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.logging_config import setup_logging
from .api.router import router as api_router
from .core.db import init_db


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI instance whose lifespan handler applies
        pending database migrations.

    Raises
    ------
    RuntimeError
        If required settings (the token secret) are missing.
    """
    setup_logging()
    settings.validate()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Creates the database file on first run; later runs only apply
        # migrations that have not been recorded yet.
        init_db()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(api_router, prefix="/api")

    # Malformed bodies are client errors like missing fields: 400, not 422.
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request body"},
        )

    return app


app = create_app()
