"""
Main entrypoint for the Guild Manager API.

This module assembles the FastAPI application: logging, CORS, the
lifespan that owns the sqlite store, the error handlers and the
``/api`` routes.  ``create_app`` builds a configured instance; the
module-level ``app`` lets uvicorn discover it::

    uvicorn guild_manager_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import GuildStore
from .core.exceptions import GuildManagerError
from .core.logging_config import setup_logging
from .schemas.guild import NAME_REQUIRED_MESSAGE
from .services.guild_service import GuildService

logger = logging.getLogger(__name__)


def _validation_message(errors: Sequence[Dict[str, Any]]) -> str:
    """Pick a human readable message from pydantic/FastAPI errors."""
    for err in errors:
        if err.get("loc", ())[:1] == ("path",):
            return "Invalid Guild ID provided."
    if not errors:
        return "Invalid request."
    first = errors[0]
    loc = tuple(first.get("loc", ()))
    if first.get("type") == "missing" and loc[-1:] == ("name",):
        return NAME_REQUIRED_MESSAGE
    ctx_error = (first.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return first.get("msg", "Invalid request.")


def _validation_details(errors: Sequence[Dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(item) for item in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}")
    return "; ".join(parts)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the ones read from the environment
        at import time.

    Returns
    -------
    FastAPI
        A configured application.  The store is opened when the
        lifespan starts, not here.
    """
    cfg = app_settings or default_settings
    setup_logging(cfg.log_level, cfg.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("--- Guild backend starting ---")
        store = GuildStore(cfg.database_url)
        store.open()
        try:
            store.init_db(seed=cfg.seed_examples)
            app.state.guild_service = GuildService(store)
            yield
        finally:
            logger.info("Shutting down, closing database connection...")
            app.state.guild_service = None
            store.close()

    app = FastAPI(title=cfg.project_name, version=cfg.api_version, lifespan=lifespan)

    logger.info("CORS origins: %s", cfg.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(GuildManagerError)
    async def guild_error_handler(request: Request, exc: GuildManagerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s - %s: %s", request.method, request.url.path, exc.message, exc.details)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(errors), "details": _validation_details(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        content = {"error": "Internal Server Error"}
        if cfg.debug:
            content["details"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "Guild Management Backend is running!"

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
