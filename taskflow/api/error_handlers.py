"""Error Handlers — global exception handlers for the TaskFlow API.

Invariants:
    - TaskFlowError → structured JSON with error code, message, severity (and field
      details for ValidationFailed)
    - RequestValidationError → field-level error details, same envelope, 400
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (TaskFlowError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep the entry point small
    - 4xx domain errors log at WARNING, 5xx at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from taskflow.core.errors import ErrorSeverity, TaskFlowError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register TaskFlow domain/infrastructure error handler."""

    @app.exception_handler(TaskFlowError)
    async def taskflow_error_handler(request: Request, exc: TaskFlowError):
        """Handle all TaskFlow domain/infrastructure errors."""
        level = logging.WARNING if exc.http_status < 500 else logging.ERROR
        logger.log(
            level, f"TaskFlowError: {exc.code}",
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
            f"Validation error on {request.url.path}",
            extra={"error_code": "VALIDATION_FAILED", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {type(exc).__name__}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response. Input values are not echoed."""
    return {
        "error": {
            "code": "VALIDATION_FAILED",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.WARNING.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
