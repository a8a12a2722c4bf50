"""
Application package initializer.

The project is organised into layers: ``core`` (configuration,
logging, storage, errors), ``schemas`` (pydantic models), ``services``
(domain logic over the in-memory store) and ``api`` (FastAPI routers,
one module per domain under ``api/endpoints``).
"""

from .main import app, create_app  # noqa: F401
