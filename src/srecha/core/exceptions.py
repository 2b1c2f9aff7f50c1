"""
Domain exceptions for the Srecha invoice engine.

Callers match on exception type (or ``code``), never on message text.
Every exception carries the operation and key it failed on in ``details``.
"""

from typing import Any


class SrechaError(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Input Exceptions
class ValidationError(SrechaError):
    """Malformed or referentially invalid input."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )

    @classmethod
    def from_pydantic(cls, error: Any) -> "ValidationError":
        """Build from the first error of a pydantic ValidationError."""
        first = error.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "input"
        return cls(field, first.get("msg", "invalid value"), first.get("input"))


class DuplicateKeyError(SrechaError):
    """Natural key collides with an existing record."""

    def __init__(self, entity: str, key: str, value: Any):
        super().__init__(
            f"{entity} with {key}={value!r} already exists",
            code="DUPLICATE_KEY",
            details={"entity": entity, "key": key, "value": str(value)},
        )


# Lookup Exceptions
class NotFoundError(SrechaError):
    """Referenced record is absent."""

    pass


class EntityNotFoundError(NotFoundError):
    """Reference entity not found in storage."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code="ENTITY_NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class InvoiceNotFoundError(NotFoundError):
    """Invoice not found in storage."""

    def __init__(self, invoice_id: int | str):
        super().__init__(
            f"Invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class DocumentNotFoundError(NotFoundError):
    """No rendered document stored under the given key."""

    def __init__(self, invoice_number: str, document_type: str, year: int, month: int):
        super().__init__(
            f"Document not found: {document_type} #{invoice_number} ({year}-{month:02d})",
            code="DOCUMENT_NOT_FOUND",
            details={
                "invoice_number": invoice_number,
                "document_type": document_type,
                "year": year,
                "month": month,
            },
        )


# Business Rule Exceptions
class BusinessRuleError(SrechaError):
    """Base exception for rejected state changes."""

    pass


class InvalidTransitionError(BusinessRuleError):
    """Requested status is not reachable from the current one."""

    def __init__(self, invoice_id: int, current: str, requested: str):
        super().__init__(
            f"Invoice {invoice_id} cannot move from '{current}' to '{requested}'",
            code="INVALID_TRANSITION",
            details={"invoice_id": invoice_id, "current": current, "requested": requested},
        )


class ImmutableStateError(BusinessRuleError):
    """Invoice can no longer be edited in its current status."""

    def __init__(self, invoice_id: int, status: str, operation: str = "update"):
        super().__init__(
            f"Invoice {invoice_id} is '{status}' and cannot be changed ({operation})",
            code="IMMUTABLE_STATE",
            details={"invoice_id": invoice_id, "status": status, "operation": operation},
        )


class ReferentialConflictError(BusinessRuleError):
    """Delete blocked by dependent records."""

    def __init__(self, entity: str, entity_id: Any, dependent: str, count: int):
        super().__init__(
            f"{entity} {entity_id} is referenced by {count} {dependent} row(s)",
            code="REFERENTIAL_CONFLICT",
            details={
                "entity": entity,
                "id": entity_id,
                "dependent": dependent,
                "count": count,
            },
        )


# Storage Exceptions
class StorageError(SrechaError):
    """Base exception for storage operations."""

    pass


class StorageUnavailableError(StorageError):
    """Underlying medium failed after bounded retry."""

    def __init__(self, operation: str, error: str, attempts: int = 1):
        super().__init__(
            f"Storage unavailable during {operation}: {error}",
            code="STORAGE_UNAVAILABLE",
            details={"operation": operation, "error": error, "attempts": attempts},
        )


# Auth Exceptions
class AuthError(SrechaError):
    """Credential check failed."""

    def __init__(self, username: str):
        # Same message for unknown user and wrong password
        super().__init__(
            "Invalid username or password",
            code="AUTH_FAILED",
            details={"username": username},
        )


class ConfigurationError(SrechaError):
    """Configuration error."""

    pass
