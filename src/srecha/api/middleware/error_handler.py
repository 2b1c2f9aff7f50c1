"""
Error handling.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action

Domain errors map to one HTTP status each; anything else is a 500.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from srecha.application.dto.responses import ErrorResponse
from srecha.config import get_logger
from srecha.core.exceptions import (
    AuthError,
    BusinessRuleError,
    ConfigurationError,
    DuplicateKeyError,
    NotFoundError,
    SrechaError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)

logger = get_logger(__name__)


# Checked in order; subclasses before their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateKeyError: status.HTTP_409_CONFLICT,
    BusinessRuleError: status.HTTP_409_CONFLICT,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices to list available invoices.",
    "DOCUMENT_NOT_FOUND": "Nothing is stored under this invoice number, type and period.",
    "ENTITY_NOT_FOUND": "Check the ID and list the collection to see available records.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DUPLICATE_KEY": "A record with this natural key already exists. Use a different value.",
    "INVALID_TRANSITION": "Allowed: draft -> issued|cancelled, issued -> paid|cancelled.",
    "IMMUTABLE_STATE": "Paid and cancelled invoices can no longer be edited.",
    "REFERENTIAL_CONFLICT": "Remove the records that still reference this one first.",
    "STORAGE_UNAVAILABLE": "The data store is busy or unavailable. Retry shortly.",
    "AUTH_FAILED": "Check the username and password.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication failed.",
    404: "The requested resource was not found. Verify the ID.",
    405: "The HTTP method is not allowed for this path.",
    409: "The request conflicts with the current state of the resource.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Last-resort error handling middleware.

    Domain errors are answered by the exception handlers below; this only
    sees what escaped them.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        status_code = status_for(exc)
        error_code = exc.code if isinstance(exc, SrechaError) else exc.__class__.__name__

        logger.error(
            "unhandled_exception",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            error_type=error_code,
            error=str(exc),
            traceback=traceback.format_exc(),
        )

        error_response = ErrorResponse(
            error_code=error_code,
            message=str(exc) if isinstance(exc, SrechaError) else "Internal server error",
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json"),
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(SrechaError)
    async def domain_exception_handler(
        request: Request,
        exc: SrechaError,
    ) -> JSONResponse:
        """Translate a domain error into its HTTP status."""
        status_code = status_for(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "request_rejected",
            path=request.url.path,
            status=status_code,
            error_code=exc.code,
            error=exc.message,
        )

        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error_code=exc.code,
                message=exc.message,
                hint=_get_hint(exc.code, status_code),
                details=exc.details,
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed requests are validation errors like any other."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=_get_hint("VALIDATION_ERROR", 400),
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
    }.get(status_code, "HTTP_ERROR")
