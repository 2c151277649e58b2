"""
Exception handlers for mapcrud applications.

Maps the error taxonomy onto HTTP status codes and the failure envelope:
- NotFoundError: 404
- ValidationFailedError: 400, one message per failing field
- BusinessRuleViolationError (incl. InvalidTransitionError): 400
- RequestValidationError (malformed body, bad path/query params): 400
- Starlette HTTPException: its own status code
- Anything else: 500 with a generic message, traceback logged server-side
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import Response


def _request_validation_messages(errors: list[dict]) -> list[str]:
    messages: list[str] = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location)
        message = error.get("msg", "Invalid value")
        messages.append(f"{field} {message}".strip() if field else message)
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the standard exception handlers on a FastAPI application.

    Args:
        app: FastAPI application instance
    """
    from fastapi import Request
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException as StarletteHTTPException

    from mapcrud.runtime.envelope import failure_response
    from mapcrud.runtime.errors import MapcrudError, ValidationFailedError
    from mapcrud.runtime.logging import get_api_logger, log_with_context

    logger = get_api_logger()

    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(request: Request, exc: ValidationFailedError) -> Response:
        """Report every failing field, in mapping-table order."""
        return failure_response(exc.status_code, request.url.path, exc.messages)

    @app.exception_handler(MapcrudError)
    async def mapcrud_error_handler(request: Request, exc: MapcrudError) -> Response:
        """Not-found and business-rule failures carry their own status code."""
        log_with_context(
            logger,
            logging.INFO,
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}",
            error=type(exc).__name__,
        )
        return failure_response(exc.status_code, request.url.path, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> Response:
        """Malformed requests are client errors: 400, one message per error."""
        return failure_response(
            400, request.url.path, _request_validation_messages(list(exc.errors()))
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        return failure_response(exc.status_code, request.url.path, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        """Never leak internals; the traceback goes to the log only."""
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc!r}",
            exc_info=exc,
        )
        return failure_response(500, request.url.path, "Internal server error")
