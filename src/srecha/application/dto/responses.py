"""Response DTOs for API endpoints."""

from datetime import date, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from srecha.core.entities.invoice import InvoiceStatus


class InvoiceItemResponse(BaseModel):
    """Invoice line response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    position: int
    product_id: int
    product_name: str | None = None
    quantity: float
    unit_price: float
    line_total: float


class InvoiceSummaryResponse(BaseModel):
    """Invoice header response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    document_type: str
    client_id: int
    client_name: str | None = None
    issue_date: date
    due_date: date | None = None
    status: InvoiceStatus
    total: float
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class InvoiceResponse(InvoiceSummaryResponse):
    """Invoice with its lines."""

    items: list[InvoiceItemResponse]


class InvoiceListResponse(BaseModel):
    """List of invoice headers."""

    invoices: list[InvoiceSummaryResponse]
    total: int


class DocumentKeyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_number: str
    document_type: str
    year: int
    month: int


class DocumentSavedResponse(DocumentKeyResponse):
    path: Path
    size: int = Field(..., description="Length of the stored content in characters")


class DocumentContentResponse(DocumentKeyResponse):
    content: str


class DocumentConsistencyResponse(BaseModel):
    orphaned: list[DocumentKeyResponse]
    missing: list[DocumentKeyResponse]
    is_consistent: bool


class PurgeDocumentsResponse(BaseModel):
    purged: list[DocumentKeyResponse]
    count: int


class LoginResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str
    invoices: int | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
