"""Entry point for the CertGuard API server.

Starts the FastAPI application under Uvicorn.  It is intended to be
executed from the project root, for example under Docker or a process
manager where you only specify a single Python file to run.

Configuration (``HOST``, ``PORT``, ``LOG_LEVEL``, ``SEED_DEMO_DATA``...)
is read from environment variables; see ``certguard_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from certguard_api.app.core.config import settings
from certguard_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Logging is already configured by create_app; uvicorn's own
        # dictConfig would detach its loggers from those handlers.
        log_config=None,
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
