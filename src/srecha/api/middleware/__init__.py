"""API middleware."""

from srecha.api.middleware.error_handler import ErrorHandlerMiddleware
from srecha.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
