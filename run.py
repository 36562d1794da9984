"""Entry point for the guild backend.

Starts the FastAPI application under uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``3001``); see ``guild_manager_api.app.core.config`` for the other
settings such as ``DATABASE_URL`` and ``CORS_ORIGINS``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from guild_manager_api.app.core.config import settings
from guild_manager_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    # log_config=None keeps the handlers installed by setup_logging
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Backend server listening on port %s", settings.port)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
