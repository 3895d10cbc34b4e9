"""Entry point for the Skill Events API.

Serves the FastAPI application with Uvicorn.  Intended to be executed
from the project root, for example under Docker, where only a single
Python file is specified.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``3001``).  All other settings are
described in ``skill_events_api/app/core/config.py``.

State is kept in memory: restarting the process clears every wallet,
event and registration.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from skill_events_api.app.core.config import settings
from skill_events_api.app.main import app


async def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3001"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Skill Events API listening on http://%s:%s", host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
