"""Rendered document artifact entities."""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DOCUMENT_TYPE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def safe_invoice_filename(invoice_number: str) -> str:
    """Invoice numbers like ``12/2024`` are filed as ``12-2024``."""
    return invoice_number.strip().replace("/", "-").replace("\\", "-")


class DocumentKey(BaseModel):
    """Composite key of a rendered document.

    The key is only conventionally bound to an invoice: storage does not
    enforce that an invoice with ``invoice_number`` exists.
    """

    model_config = ConfigDict(frozen=True)

    invoice_number: str = Field(min_length=1, max_length=128)
    document_type: str = Field(min_length=1, max_length=64)
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)

    @field_validator("invoice_number")
    @classmethod
    def check_invoice_number(cls, v: str) -> str:
        if safe_invoice_filename(v) in ("", ".", ".."):
            raise ValueError("invoice number cannot be used as a file name")
        if any(ord(ch) < 32 for ch in v):
            raise ValueError("invoice number contains control characters")
        return v

    @field_validator("document_type")
    @classmethod
    def check_document_type(cls, v: str) -> str:
        if not _DOCUMENT_TYPE_RE.match(v):
            raise ValueError("document type may only contain letters, digits, '_' and '-'")
        return v

    @property
    def filename_stem(self) -> str:
        return safe_invoice_filename(self.invoice_number)

    @property
    def period(self) -> tuple[int, int]:
        return self.year, self.month

    @property
    def location(self) -> tuple[str, int, int, str]:
        """Identity of the file this key maps to."""
        return self.document_type, self.year, self.month, self.filename_stem

    def relative_dir(self) -> Path:
        """``<document_type>/<year>/<MM>``"""
        return Path(self.document_type) / f"{self.year:04d}" / f"{self.month:02d}"


class DocumentArtifact(BaseModel):
    """Stored rendered document."""

    key: DocumentKey
    content: str
    path: Path


class DocumentConsistencyReport(BaseModel):
    """Artifacts and invoices whose convention-based link is broken.

    Both conditions are informational; neither blocks any operation.
    """

    orphaned: list[DocumentKey] = Field(default_factory=list)
    missing: list[DocumentKey] = Field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.orphaned and not self.missing
