"""
Exception types and handlers shared by all routes.

Services raise ``ValueError`` when a referenced record does not exist
(handlers turn it into HTTP 404) and ``DuplicateError`` when a write
would violate a uniqueness rule (HTTP 409).  The handlers registered
by ``register_exception_handlers`` give the remaining failures a
uniform shape:

* request or record validation failure: HTTP 400 with
  ``{"error": "Validation failed", "errors": [{"field", "message"}]}``
* anything unexpected: HTTP 500 with ``{"error": "Internal server error"}``
"""

import logging
from typing import Any, Dict, Iterable, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError


logger = logging.getLogger(__name__)


class DuplicateError(Exception):
    """Raised when a record would duplicate a unique value."""


def _format_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    formatted = []
    for err in errors:
        # Drop the "body"/"query"/"path" prefix FastAPI adds to locations.
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        formatted.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return formatted


def validation_error_response(errors: Iterable[Dict[str, Any]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "errors": _format_errors(errors)},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return validation_error_response(exc.errors())


async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return validation_error_response(exc.errors())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, model_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
