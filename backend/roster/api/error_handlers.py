"""Error Handlers: global exception handlers for the Roster API.

Invariants:
    - RosterError → {"error": message} with the error's HTTP status
    - RequestValidationError → 400 {"error": "Validation error: ..."}
    - Unknown path or unsupported method → 404 {"error": "Route not found"}
    - Other Starlette HTTPException (429) → {"error": detail}, headers kept
    - Exception (catch-all) → 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from roster.core.errors import ErrorSeverity, RosterError

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "Route not found"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_roster_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_roster_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(RosterError)
    async def roster_error_handler(request: Request, exc: RosterError):
        """Handle all Roster domain/infrastructure errors."""
        level = (
            logging.ERROR if exc.severity == ErrorSeverity.CRITICAL
            else logging.WARNING
        )
        logger.log(
            level,
            f"RosterError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": format_validation_errors(exc)},
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register HTTP exception handler (unmatched routes and methods, 429)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Render framework HTTP errors in the API's error shape."""
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED or (
            exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found"
        ):
            # Method mismatches fall through to the route-not-found response
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": ROUTE_NOT_FOUND_MESSAGE},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )


def format_validation_errors(exc: RequestValidationError) -> str:
    """One-line summary: 'Validation error: body.email: value is not a valid email ...'."""
    parts = []
    for e in exc.errors():
        field = ".".join(str(loc) for loc in e["loc"])
        parts.append(f"{field}: {e['msg']}" if field else e["msg"])
    return "Validation error: " + "; ".join(parts)
