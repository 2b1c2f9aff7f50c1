"""
Bounded retry for transient storage failures.

Lock contention on the database file and short-lived sharing violations on
document files are retried a fixed number of times. Anything still failing
after that surfaces as StorageUnavailableError.
"""

import sqlite3
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar, cast

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from srecha.config import get_logger
from srecha.core.exceptions import StorageUnavailableError

logger = get_logger(__name__)

T = TypeVar("T")

_TRANSIENT_MARKERS = ("locked", "busy")


def is_transient(error: BaseException) -> bool:
    """True for failures that may succeed if simply tried again."""
    if isinstance(error, sqlite3.OperationalError):
        message = str(error).lower()
        return any(marker in message for marker in _TRANSIENT_MARKERS)
    return isinstance(error, (BlockingIOError, InterruptedError, PermissionError))


class StorageRetry:
    """Retry policy shared by the stores of one container."""

    def __init__(self, max_attempts: int = 3, delay: float = 0.05):
        self.max_attempts = max(1, max_attempts)
        self.delay = delay

    def _get_retry_decorator(self) -> Any:
        return retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception(is_transient),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "storage_retry",
            operation=getattr(retry_state.fn, "__name__", None),
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def run(
        self,
        operation: str,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute a storage operation with bounded retry.

        Args:
            operation: Name used in logs and in the raised error
            func: Async callable performing one complete attempt
            *args: Positional arguments
            **kwargs: Keyword arguments

        Returns:
            Result of func

        Raises:
            StorageUnavailableError: If the medium keeps failing
        """
        try:
            result = await self._get_retry_decorator()(func)(*args, **kwargs)
            return cast(T, result)

        except sqlite3.IntegrityError:
            # Constraint violations are the caller's to translate
            raise

        except (sqlite3.DatabaseError, OSError) as e:
            attempts = self.max_attempts if is_transient(e) else 1
            logger.error(
                "storage_unavailable",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                attempts=attempts,
            )
            raise StorageUnavailableError(operation, str(e), attempts) from e
