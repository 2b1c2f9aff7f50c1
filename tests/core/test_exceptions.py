"""Unit tests for domain exceptions."""

import pytest
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from srecha.core.exceptions import (
    AuthError,
    BusinessRuleError,
    DocumentNotFoundError,
    DuplicateKeyError,
    EntityNotFoundError,
    ImmutableStateError,
    InvalidTransitionError,
    InvoiceNotFoundError,
    NotFoundError,
    ReferentialConflictError,
    SrechaError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)


class TestSrechaError:
    """Tests for base SrechaError exception."""

    def test_basic_initialization(self):
        error = SrechaError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "SrechaError"
        assert error.details == {}

    def test_to_dict(self):
        error = SrechaError("Test error", code="TEST_CODE", details={"extra": "info"})
        assert error.to_dict() == {
            "error": "TEST_CODE",
            "message": "Test error",
            "details": {"extra": "info"},
        }


class TestValidationError:
    def test_details(self):
        error = ValidationError("client_id", "client does not exist", 7)
        assert error.code == "VALIDATION_ERROR"
        assert error.details == {
            "field": "client_id",
            "message": "client does not exist",
            "value": "7",
        }

    def test_long_value_truncated(self):
        error = ValidationError("notes", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_from_pydantic(self):
        class Model(BaseModel):
            quantity: float = Field(gt=0)

        with pytest.raises(PydanticValidationError) as exc_info:
            Model(quantity=-1)

        error = ValidationError.from_pydantic(exc_info.value)
        assert error.details["field"] == "quantity"
        assert error.details["value"] == "-1"


class TestHierarchy:
    """Callers match on type; each family shares one base."""

    @pytest.mark.parametrize(
        ("error", "base"),
        [
            (EntityNotFoundError("client", 1), NotFoundError),
            (InvoiceNotFoundError(1), NotFoundError),
            (DocumentNotFoundError("1", "invoice", 2024, 1), NotFoundError),
            (InvalidTransitionError(1, "paid", "draft"), BusinessRuleError),
            (ImmutableStateError(1, "paid"), BusinessRuleError),
            (ReferentialConflictError("client", 1, "invoices", 2), BusinessRuleError),
            (StorageUnavailableError("save", "disk full"), StorageError),
        ],
    )
    def test_family(self, error, base):
        assert isinstance(error, base)
        assert isinstance(error, SrechaError)

    def test_duplicate_key_is_not_a_validation_error(self):
        assert not isinstance(DuplicateKeyError("product", "code", "SKU-1"), ValidationError)


class TestSpecificErrors:
    def test_invalid_transition(self):
        error = InvalidTransitionError(5, "issued", "draft")
        assert error.code == "INVALID_TRANSITION"
        assert error.details == {"invoice_id": 5, "current": "issued", "requested": "draft"}

    def test_document_not_found_message(self):
        error = DocumentNotFoundError("12/2024", "invoice", 2024, 3)
        assert "2024-03" in error.message
        assert error.details["invoice_number"] == "12/2024"

    def test_storage_unavailable_attempts(self):
        error = StorageUnavailableError("create_invoice", "database is locked", attempts=3)
        assert error.code == "STORAGE_UNAVAILABLE"
        assert error.details["attempts"] == 3

    def test_auth_error_does_not_reveal_which_part_failed(self):
        assert AuthError("alice").message == AuthError("bob").message
        assert "password" not in str(AuthError("alice").details)
