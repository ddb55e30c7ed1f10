"""Error Handlers: global exception handlers for the quota API.

Invariants:
    - QuotaEngineError -> structured JSON with code, message, severity
    - RequestValidationError -> field-level error details (400)
    - Exception (catch-all) -> never leaks internal details

Design Decisions:
    - Admission denials never reach these handlers: routes render them as 403 payloads
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quota_engine.core.errors import ErrorCategory, ErrorSeverity, QuotaEngineError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_quota_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_quota_error_handler(app: FastAPI) -> None:

    @app.exception_handler(QuotaEngineError)
    async def quota_error_handler(request: Request, exc: QuotaEngineError):
        logger.error(
            f"QuotaEngineError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "tenant_id": exc.context.tenant_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
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
