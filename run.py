"""Entry point for the Bazaar Ramadhan API server.

Launches the FastAPI application with Uvicorn.  Configuration such as
``SECRET_KEY`` and ``DATABASE_URL`` is read from the environment (see
``bazaar_api/app/core/config.py``); host and port come from
``API_HOST`` and ``API_PORT``.

Usage:
    SECRET_KEY=... python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server


async def run_api() -> None:
    """Start the API using Uvicorn.

    Host and port are read from environment variables ``API_HOST`` and
    ``API_PORT``. Defaults are ``0.0.0.0`` and ``8000``.
    """
    # Imported here so a missing SECRET_KEY surfaces as a startup error
    # after logging is configured.
    from bazaar_api.app.main import app

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
