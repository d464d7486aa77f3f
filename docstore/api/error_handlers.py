"""Error Handlers — global exception handlers for the docstore API.

Invariants:
    - Every handler answers with DocStoreError.to_response(), one envelope shape
    - RequestValidationError → InvalidPayloadError (400) with field-level details
    - Exception (catch-all) → InternalError (500), never leaks internal details
    - Not-found logged at INFO, persistence and internal failures at ERROR

Design Decisions:
    - Three-layer handler: domain (DocStoreError), validation (Pydantic), catch-all (Exception)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from docstore.core.errors import (
    DocStoreError,
    ErrorContext,
    InternalError,
    InvalidPayloadError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_docstore_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _respond(request: Request, exc: DocStoreError) -> JSONResponse:
    exc.context.path = exc.context.path or request.url.path
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _register_docstore_error_handler(app: FastAPI) -> None:

    @app.exception_handler(DocStoreError)
    async def docstore_error_handler(request: Request, exc: DocStoreError):
        """Handle all docstore domain/infrastructure errors."""
        log = logger.info if isinstance(exc, ResourceNotFoundError) else logger.error
        log(
            f"DocStoreError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return _respond(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return _respond(request, InvalidPayloadError(_field_details(exc)))


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return _respond(request, InternalError(ErrorContext(path=request.url.path)))


def _field_details(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors to field/message/type triples."""
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
