"""
Main entrypoint for the CertGuard API.

This module assembles the FastAPI application, sets up logging,
attaches the in-memory store and includes the API router under
``/api``.  ``create_app`` builds and configures an app, which is then
instantiated at module import time as ``app`` so it can be served
directly, e.g.::

    uvicorn certguard_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router as api_router
from .core.config import settings
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.storage import MemStorage, seed_demo_data


def create_app(storage: Optional[MemStorage] = None, seed: Optional[bool] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    storage : Optional[MemStorage]
        Store to serve.  A fresh, empty ``MemStorage`` is created when
        omitted, so separate apps never share data.
    seed : Optional[bool]
        Whether to load the demo data set into the store.  Defaults to
        ``settings.seed_demo_data``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the code below
    # can safely log messages.
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        max_bytes=settings.log_file_max_bytes,
        backups=settings.log_file_backups,
    )
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    # The admin client is usually served from another origin (Vite dev
    # server, CDN), so allow cross-origin calls from the configured list.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.state.storage = storage if storage is not None else MemStorage()
    if settings.seed_demo_data if seed is None else seed:
        seed_demo_data(app.state.storage)
        logger.info("Demo data loaded into the in-memory store")

    app.include_router(api_router, prefix="/api")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
